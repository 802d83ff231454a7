#!/usr/bin/env python3
"""
main.py - Main entry point for the chat command bot.

This script provides CLI access to:
1. Run the bot (connect, answer chat commands, reconnect on disconnect)
2. Show the effective configuration

Usage:
    python main.py run                          Connect using env / config
    python main.py run --dry-run --owner Steve  Simulated world, no network
    python main.py run --config bot.yaml        Load settings from a file
    python main.py show-config                  Print effective settings

Configuration is read from (lowest to highest precedence) the config
file, a .env file, the environment (MC_HOST, MC_PORT, MC_USER, MC_PASS,
MC_VERSION, MC_OWNER, AFK_INTERVAL, RECONNECT_DELAY) and the flags below.

SAFETY NOTE:
The bot is intended to be used only where automation is explicitly
allowed by the server owner. Do not use this in violation of any
server's terms of service.
"""

import argparse
import sys
import os
import logging

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from utils import ConfigError, build_config, load_env_file

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _load_config(args):
    load_env_file(args.env_file)

    overrides = {
        'host': args.host,
        'port': args.port,
        'username': args.username,
        'owner': args.owner,
        'afk_interval': args.afk_interval,
        'dry_run': True if args.dry_run else None,
    }
    config_path = args.config if args.config and os.path.exists(args.config) else None
    return build_config(config_path, overrides=overrides)


def run_bot(args) -> int:
    """Run the bot until interrupted."""
    from chat_bot import SessionManager

    config = _load_config(args)

    print("=" * 60)
    print("Chat Command Bot")
    print("=" * 60)
    print(f"\nConfiguration:")
    print(f"  Host: {config.host}:{config.port}")
    print(f"  Username: {config.username}")
    print(f"  Version: {config.version or 'auto'}")
    print(f"  Owner: {config.owner or '(not set, owner commands disabled)'}")
    print(f"  Idle motion: {config.afk_interval if config.afk_interval > 0 else 'off'}")
    print(f"  Dry run: {config.dry_run}")
    print()

    if config.dry_run:
        print("DRY RUN MODE: No network connection will be made")
        print()

    manager = SessionManager(config)
    manager.run()

    stats = manager.get_stats()
    print("\n" + "=" * 60)
    print("Session Summary")
    print("=" * 60)
    print(f"Uptime: {stats['uptime_minutes']:.1f} minutes")
    print(f"Sessions started: {stats['sessions_started']}")
    print(f"Reconnects: {stats['reconnects']}")
    return 0


def show_config(args) -> int:
    """Print the effective configuration with secrets masked."""
    config = _load_config(args)
    for key, value in config.to_dict().items():
        print(f"{key}: {value}")
    return 0


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--config', type=str, default='config.yaml',
                        help='Path to configuration file (YAML or JSON)')
    parser.add_argument('--env-file', type=str, default=None,
                        help='Path to .env file (default: ./.env)')
    parser.add_argument('--host', type=str, default=None,
                        help='Server host')
    parser.add_argument('--port', type=int, default=None,
                        help='Server port')
    parser.add_argument('--username', type=str, default=None,
                        help='Bot username')
    parser.add_argument('--owner', type=str, default=None,
                        help='Username allowed to run owner-only commands')
    parser.add_argument('--afk-interval', type=float, default=None,
                        help='Seconds between idle motions (0 disables)')
    parser.add_argument('--dry-run', action='store_true',
                        help='Use the simulated world instead of a server')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Debug logging')


def main(argv=None) -> int:
    """Main entry point with subcommand support."""
    parser = argparse.ArgumentParser(
        description="Chat command bot - follow, goto, eat, equip and shop via chat",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py run                          Connect using env / config
  python main.py run --dry-run --owner Steve  Simulated world, no network
  python main.py show-config                  Print effective settings
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    run_parser = subparsers.add_parser('run', help='Run the bot')
    _add_common_arguments(run_parser)

    show_parser = subparsers.add_parser('show-config', help='Print effective configuration')
    _add_common_arguments(show_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    setup_logging(args.verbose)

    try:
        if args.command == 'run':
            return run_bot(args)
        return show_config(args)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
