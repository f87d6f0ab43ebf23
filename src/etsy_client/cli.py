"""
Command-line interface for Etsy OAuth and connectivity tasks.

Covers the operations needed to install an app for a shop: building the
authorization URL, exchanging the returned code for tokens, refreshing or
migrating tokens, and checking that the configured credentials work.
Settings come from ``ETSY_*`` environment variables or a ``.env`` file.
"""

import argparse
import json
import sys
from typing import List, Optional

from etsy_client.api.transport import HTTPTransport
from etsy_client.client import Etsy
from etsy_client.oauth.scopes import ALL_SCOPES
from etsy_client.oauth.token_manager import TokenManager
from etsy_client.utils.config import EtsySettings, get_config, reload_config
from etsy_client.utils.exceptions import ConfigurationError, EtsyClientError
from etsy_client.utils.logger import get_logger, setup_logging


cli_logger = get_logger(__name__)


class EtsyClientCLI:
    """Command-line interface for Etsy client operations."""

    def __init__(self, settings: Optional[EtsySettings] = None,
                 transport: Optional[HTTPTransport] = None):
        self.settings = settings
        self.transport = transport

    def _init_settings(self) -> EtsySettings:
        """Load settings (lazy loading)."""
        if self.settings is None:
            self.settings = get_config()
            cli_logger.info("Settings loaded successfully")
        return self.settings

    def _token_manager(self) -> TokenManager:
        settings = self._init_settings()
        return TokenManager(
            settings.client_id,
            transport=self.transport,
            connect_url=settings.connect_url,
            token_url=settings.token_url,
            timeout=settings.timeout
        )

    def _redirect_uri(self, args) -> str:
        redirect_uri = args.redirect_uri or self._init_settings().redirect_uri
        if not redirect_uri:
            raise ConfigurationError("A redirect URI is required (--redirect-uri or ETSY_REDIRECT_URI)")
        return redirect_uri

    @staticmethod
    def _print_tokens(tokens) -> None:
        print(json.dumps({
            "access_token": tokens.access_token,
            "refresh_token": tokens.refresh_token,
            "token_type": tokens.token_type,
            "expires_in": tokens.expires_in,
        }, indent=2))

    def cmd_auth_url(self, args) -> int:
        """Print an authorization URL plus the verifier and state to keep."""
        manager = self._token_manager()
        verifier, challenge = manager.generate_pkce_challenge()
        state = manager.create_nonce()
        url = manager.build_authorization_url(
            self._redirect_uri(args),
            args.scopes or ALL_SCOPES,
            challenge,
            state
        )
        print(url)
        print(f"verifier: {verifier}")
        print(f"state: {state}")
        return 0

    def cmd_token(self, args) -> int:
        manager = self._token_manager()
        tokens = manager.exchange_authorization_code(self._redirect_uri(args), args.code, args.verifier)
        self._print_tokens(tokens)
        return 0

    def cmd_refresh(self, args) -> int:
        refresh_token = args.refresh_token or self._init_settings().refresh_token
        if not refresh_token:
            raise ConfigurationError("A refresh token is required (--refresh-token or ETSY_REFRESH_TOKEN)")
        tokens = self._token_manager().refresh_access_token(refresh_token)
        self._print_tokens(tokens)
        return 0

    def cmd_exchange_legacy(self, args) -> int:
        tokens = self._token_manager().exchange_legacy_token(args.legacy_token)
        self._print_tokens(tokens)
        return 0

    def cmd_ping(self, args) -> int:
        """Check connectivity with the configured credentials."""
        with Etsy.from_settings(self._init_settings(), transport=self.transport) as etsy:
            application_id = etsy.ping()
        if application_id is None:
            print("❌ Ping returned no application id")
            return 1
        print(f"✅ API reachable, application id {application_id}")
        return 0

    def cmd_config(self, args) -> int:
        """Handle configuration commands."""
        if args.config_action == "reload":
            self.settings = reload_config()
            print("✅ Configuration reloaded")
            return 0

        settings = self._init_settings()
        if args.config_action == "validate":
            print("✅ Configuration is valid")
            return 0

        print("📋 Current configuration:")
        print(json.dumps(settings.summary(), indent=2))
        return 0

    def run(self, args) -> int:
        handlers = {
            "auth-url": self.cmd_auth_url,
            "token": self.cmd_token,
            "refresh": self.cmd_refresh,
            "exchange-legacy": self.cmd_exchange_legacy,
            "ping": self.cmd_ping,
            "config": self.cmd_config,
        }
        handler = handlers.get(args.command)
        if handler is None:
            print(f"❌ Unknown command: {args.command}")
            return 1
        return handler(args)


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="etsy-client",
        description="Etsy client CLI - OAuth setup and connectivity checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  etsy-client auth-url --redirect-uri https://example.com/callback
  etsy-client token --code CODE --verifier VERIFIER
  etsy-client refresh                  # Uses ETSY_REFRESH_TOKEN
  etsy-client ping                     # Check credentials
  etsy-client config show              # Show sanitized settings
        """
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set logging level (default: ETSY_LOG_LEVEL or WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    auth_parser = subparsers.add_parser("auth-url", help="Build an OAuth authorization URL")
    auth_parser.add_argument("--redirect-uri", help="Registered redirect URI")
    auth_parser.add_argument(
        "--scopes",
        nargs="+",
        choices=ALL_SCOPES,
        metavar="SCOPE",
        help="Scopes to request (default: all)"
    )

    token_parser = subparsers.add_parser("token", help="Exchange an authorization code for tokens")
    token_parser.add_argument("--code", required=True, help="Authorization code from the redirect")
    token_parser.add_argument("--verifier", required=True, help="PKCE verifier printed by auth-url")
    token_parser.add_argument("--redirect-uri", help="Registered redirect URI")

    refresh_parser = subparsers.add_parser("refresh", help="Refresh the access token")
    refresh_parser.add_argument("--refresh-token", help="Refresh token (default: ETSY_REFRESH_TOKEN)")

    legacy_parser = subparsers.add_parser("exchange-legacy", help="Exchange an OAuth1 token for OAuth2 tokens")
    legacy_parser.add_argument("legacy_token", help="Legacy OAuth1 access token")

    subparsers.add_parser("ping", help="Check API connectivity")

    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_parser.add_argument(
        "config_action",
        choices=["show", "validate", "reload"],
        help="Configuration action to perform"
    )

    return parser


def main(argv: Optional[List[str]] = None, cli: Optional[EtsyClientCLI] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    if not args.command:
        parser.print_help()
        return 1

    cli = cli or EtsyClientCLI()

    try:
        return cli.run(args)
    except KeyboardInterrupt:
        print("\n⏹️  Operation cancelled by user")
        return 130
    except EtsyClientError as e:
        cli_logger.error(f"CLI operation failed: {e}")
        print(f"❌ Operation failed: {e}")
        return 1


def cli_entry_point():
    """Entry point for console script."""
    sys.exit(main())


if __name__ == "__main__":
    cli_entry_point()
