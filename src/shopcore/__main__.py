"""Entry point for 'python -m shopcore' command."""

from shopcore.cli import main

if __name__ == "__main__":
    main()
