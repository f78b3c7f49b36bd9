"""Allow ``python -m filedeck``."""

from filedeck.cli.typer_app import main

if __name__ == "__main__":
    main()
