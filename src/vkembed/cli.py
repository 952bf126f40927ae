#!/usr/bin/env python3
"""
vkembed CLI - Turn VK video links into embeddable player URLs.

Usage:
    vkembed serve --port 8000
    vkembed resolve "https://vk.com/video-123456789_456239017"
    vkembed resolve "https://vk.com/video-123456789_456239017" --lookup
"""

import argparse
import asyncio
import json
import logging
import sys

from vkembed.exceptions import VkEmbedError


def _cmd_serve(args):
    """Handle the serve subcommand."""
    from vkembed.server import serve

    serve(host=args.host, port=args.port, log_level=args.log_level)


async def _lookup(url: str) -> dict:
    from vkembed.config.loader import get_config
    from vkembed.operations.resolve import resolve_embed
    from vkembed.providers.vk import VkVideoProvider

    config = get_config()
    provider = VkVideoProvider.from_config(config) if config.is_configured else None
    try:
        result = await resolve_embed(url, provider)
    finally:
        if provider is not None:
            await provider.aclose()
    return result.to_response()


def _cmd_resolve(args):
    """Handle the resolve subcommand."""
    from vkembed.urls import resolve_video_url

    try:
        if args.lookup:
            output = asyncio.run(_lookup(args.url))
        else:
            reference = resolve_video_url(args.url)
            output = {
                "ownerId": reference.owner_id,
                "videoId": reference.video_id,
                "accessKey": reference.access_key,
                "lookupKey": reference.lookup_key,
            }
    except VkEmbedError as e:
        print(json.dumps(e.to_dict(), indent=2))
        sys.exit(1)

    print(json.dumps(output, indent=2, ensure_ascii=False))


def main(argv=None):
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )

    parser = argparse.ArgumentParser(
        description="Resolve VK video links into embed URLs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s serve
    %(prog)s serve --host 127.0.0.1 --port 9000
    %(prog)s resolve "https://vk.com/video_ext.php?oid=-1&id=2&hash=ab12"
    %(prog)s resolve "https://vkvideo.ru/video-1_2" --lookup
        """,
    )

    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: from config)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: from config)")
    serve_parser.add_argument(
        "--log-level", default="info",
        help="uvicorn log level (default: info)",
    )

    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve a VK video URL",
    )
    resolve_parser.add_argument("url", help="VK video URL")
    resolve_parser.add_argument(
        "--lookup", action="store_true",
        help="Query the VK API and print the full embed response",
    )

    args = parser.parse_args(argv)

    if args.command == "serve":
        _cmd_serve(args)
    elif args.command == "resolve":
        _cmd_resolve(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
