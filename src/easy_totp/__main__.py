"""Allow ``python -m easy_totp``."""

from easy_totp.cli import main

if __name__ == "__main__":
    main()
