"""CLI: asset-client upload | get | fetch-token."""
import argparse
import json
import sys
from pathlib import Path

from .client import AssetClient


def main() -> int:
    parser = argparse.ArgumentParser(prog="asset-client", description="Upload and fetch assets from the asset store API")
    parser.add_argument("--base-url", default="http://localhost:8000", help="API base URL (including any base path)")
    sub = parser.add_subparsers(dest="command", required=True)

    # upload
    p_upload = sub.add_parser("upload", help="Upload a file")
    p_upload.add_argument("file", help="Local file path")
    p_upload.add_argument("--token-minutes", type=int, default=0, help="Also issue an access token valid for this many minutes")
    p_upload.set_defaults(func=cmd_upload)

    # get
    p_get = sub.add_parser("get", help="Download an asset by id")
    p_get.add_argument("asset_id", help="Asset id")
    p_get.add_argument("--out", default=".", help="Destination directory")
    p_get.set_defaults(func=cmd_get)

    # fetch-token
    p_token = sub.add_parser("fetch-token", help="Download an asset by access token")
    p_token.add_argument("token", help="Access token")
    p_token.add_argument("--out", default=".", help="Destination directory")
    p_token.set_defaults(func=cmd_fetch_token)

    args = parser.parse_args()
    client = AssetClient(base_url=args.base_url)
    try:
        return args.func(client, args)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        client.close()


def cmd_upload(client: AssetClient, args: argparse.Namespace) -> int:
    path = Path(args.file)
    if not path.exists():
        print(f"Missing file: {path}", file=sys.stderr)
        return 1
    out = client.upload(path, token_minutes=args.token_minutes)
    print(json.dumps(out, indent=2))
    print(f"Stored asset_id: {out['asset']['id']}", file=sys.stderr)
    if out.get("token"):
        print(f"Token: {out['token']['token']}", file=sys.stderr)
    return 0


def cmd_get(client: AssetClient, args: argparse.Namespace) -> int:
    written = client.download(args.out, asset_id=args.asset_id)
    print(str(written))
    return 0


def cmd_fetch_token(client: AssetClient, args: argparse.Namespace) -> int:
    written = client.download(args.out, token=args.token)
    print(str(written))
    return 0


if __name__ == "__main__":
    sys.exit(main())
