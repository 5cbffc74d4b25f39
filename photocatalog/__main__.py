"""
Allow running the package with: python -m photocatalog

By default, opens the interactive catalog shell. Use the 'config' subcommand
to inspect or create the user configuration file.

Examples:
    python -m photocatalog                       # Shell on the default catalog
    python -m photocatalog holidays.json         # Shell on holidays.json
    python -m photocatalog photos -c STATS       # Run one command and exit
    python -m photocatalog config                # Show configuration
    python -m photocatalog config --init         # Create example config file
"""

import sys


def show_config(init: bool = False) -> int:
    """Show the user configuration, or create an example file with init=True."""
    from .user_config import get_user_config

    config = get_user_config()

    if init:
        # Create example config file
        if config.create_example_config():
            print("✓ Created example configuration file at:")
            print(f"  {config.config_file_path}")
            print("\nEdit this file to customize Photo Catalog settings.")
            return 0
        print("✗ Failed to create configuration file.")
        return 1

    # Show current config path and values
    print(f"Configuration file: {config.config_file_path}")
    if config.config_file_path.exists():
        print("Status: ✓ Found")
    else:
        print("Status: ✗ Not found (using defaults)")
        print("\nRun 'python -m photocatalog config --init' to create one.")

    print("\nCurrent settings:")
    print(f"  db_file: {config.db_file}")
    print(f"  recursive_scan: {config.recursive_scan}")
    print(f"  prefer_exif_timestamp: {config.prefer_exif_timestamp}")
    print(f"  show_progress: {config.show_progress}")
    return 0


def main():
    if len(sys.argv) > 1 and sys.argv[1] == 'config':
        init = '--init' in sys.argv[2:] or '-i' in sys.argv[2:]
        sys.exit(show_config(init))

    from .cli import main as cli_main
    sys.exit(cli_main())


if __name__ == '__main__':
    main()
