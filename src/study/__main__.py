"""Allow running the CLI via python -m src.study."""

from src.study.cli import main

if __name__ == "__main__":
    main()
