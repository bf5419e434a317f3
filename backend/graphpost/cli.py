from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from .config import GraphClientConfig, settings
from .errors import GraphApiError
from .models import MediaType
from .services import Authenticator, Publisher, UserDetails


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _require(value: str | None, name: str) -> str:
    if not value:
        raise RuntimeError(f"Missing {name}. Provide the argument or set it in the environment.")
    return value


def _user_details(args: argparse.Namespace) -> UserDetails:
    token = _require(args.access_token or settings.access_token, "access token (GRAPHPOST_ACCESS_TOKEN)")
    return UserDetails(GraphClientConfig.from_settings(access_token=token))


def cmd_exchange_code(args: argparse.Namespace) -> None:
    with Authenticator.from_settings() as authenticator:
        if args.long_lived or args.fields:
            _print_json(authenticator.get_user_info_from_code(args.code, fields=args.fields))
        else:
            _print_json(authenticator.exchange_code_for_token(args.code))


def cmd_long_lived(args: argparse.Namespace) -> None:
    client_secret = _require(args.client_secret or settings.client_secret, "client secret (GRAPHPOST_CLIENT_SECRET)")
    with _user_details(args) as client:
        _print_json(client.get_long_lived_access_token(client_secret))


def cmd_refresh(args: argparse.Namespace) -> None:
    with _user_details(args) as client:
        _print_json(client.refresh_access_token())


def cmd_me(args: argparse.Namespace) -> None:
    with _user_details(args) as client:
        _print_json(client.get_user_info(args.fields))


def cmd_publish(args: argparse.Namespace) -> None:
    ig_id = _require(args.ig_id or settings.ig_user_id, "Instagram user id (GRAPHPOST_IG_USER_ID)")
    source = settings
    if args.poll_interval is not None:
        source = settings.model_copy(update={"container_poll_interval_seconds": args.poll_interval})
    media_url: str | list[str] = args.media_url[0] if len(args.media_url) == 1 else list(args.media_url)
    media_type = args.media_type
    if isinstance(media_url, list) and media_type == MediaType.IMAGE.value:
        media_type = MediaType.CAROUSEL.value
    with Publisher.from_settings(source, access_token=args.access_token) as publisher:
        _print_json(publisher.publish(ig_id, media_url, media_type, args.caption))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Instagram login, token and publishing utilities."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log container lifecycle events")
    sub = parser.add_subparsers(dest="command", required=True)

    p_code = sub.add_parser("exchange-code", help="Exchange an OAuth authorization code for a token")
    p_code.add_argument("code")
    p_code.add_argument("--long-lived", action="store_true", help="Upgrade to a long-lived token")
    p_code.add_argument("--fields", help="Also fetch these profile fields (implies --long-lived)")
    p_code.set_defaults(func=cmd_exchange_code)

    p_long = sub.add_parser("long-lived", help="Exchange a short-lived token for a long-lived one")
    p_long.add_argument("--access-token")
    p_long.add_argument("--client-secret")
    p_long.set_defaults(func=cmd_long_lived)

    p_refresh = sub.add_parser("refresh", help="Refresh a long-lived token")
    p_refresh.add_argument("--access-token")
    p_refresh.set_defaults(func=cmd_refresh)

    p_me = sub.add_parser("me", help="Fetch profile fields for the token owner")
    p_me.add_argument("--access-token")
    p_me.add_argument("--fields", default="id,username")
    p_me.set_defaults(func=cmd_me)

    p_publish = sub.add_parser("publish", help="Publish one media url, or a carousel of several")
    p_publish.add_argument("media_url", nargs="+")
    p_publish.add_argument("--ig-id")
    p_publish.add_argument("--access-token")
    p_publish.add_argument(
        "--media-type",
        default=MediaType.IMAGE.value,
        choices=[media_type.value for media_type in MediaType],
    )
    p_publish.add_argument("--caption")
    p_publish.add_argument("--poll-interval", type=float, help="Seconds between status polls")
    p_publish.set_defaults(func=cmd_publish)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(message)s",
    )
    try:
        args.func(args)
    except GraphApiError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except RuntimeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
