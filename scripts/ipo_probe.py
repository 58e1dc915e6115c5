#!/usr/bin/env python3
"""Probe script for the IP Office management API client.

Authenticates against an appliance, lists one kind of record, prints the
parsed records (and user statistics when listing users), then logs out.

Usage:
    python scripts/ipo_probe.py --host 10.0.0.10 --username Administrator --password secret

    # List licenses, verifying the appliance certificate
    python scripts/ipo_probe.py --host ipo.example.com --username admin --kind licenses --insecure
"""

import argparse
import asyncio
import getpass
import json
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.services.user_stats_service import compute_user_stats  # noqa: E402
from integration.enums import IpoRecordKind  # noqa: E402
from integration.exceptions import IpoException  # noqa: E402
from integration.models.ipo_session_dto import IpoCredentials  # noqa: E402
from integration.services.ipo_api_client import IpoApiClient  # noqa: E402
from integration.services.ipo_envelope_parser import parse_envelope  # noqa: E402

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
log = logging.getLogger(__name__)


async def probe(credentials: IpoCredentials, kind: IpoRecordKind, show_raw: bool = False) -> bool:
    """List one record kind from the appliance and print the outcome.

    Returns:
        True if the appliance answered and the body could be parsed
    """
    client = IpoApiClient()
    log.info(f"Probing IP Office at {credentials.host} ({kind.name.lower()})")

    try:
        response = await client.with_session(
            credentials,
            lambda session: client.request(credentials, session, kind.resource_path),
        )
    except IpoException as e:
        log.error(f"❌ {e}")
        return False

    parsed = parse_envelope(response.text, kind.record_key)
    log.info(
        f"✅ HTTP {response.status_code} ({response.content_type or 'no content-type'}), "
        f"parsed as {parsed.format.value}, {len(parsed.records)} record(s)"
    )

    for record in parsed.records:
        print(json.dumps(record, ensure_ascii=False))

    if kind is IpoRecordKind.USERS:
        stats = compute_user_stats(parsed.records)
        print(json.dumps(stats.to_dict(), indent=2))

    if show_raw:
        print(response.text)

    return parsed.format.value != "unknown"


def main():
    parser = argparse.ArgumentParser(description="Probe the IP Office management API")
    parser.add_argument("--host", required=True, help="Appliance hostname, IP address or URL")
    parser.add_argument("--username", required=True, help="Management account name")
    parser.add_argument("--password", help="Management account password (prompted when omitted)")
    parser.add_argument(
        "--kind",
        choices=[kind.name.lower() for kind in IpoRecordKind],
        default="users",
        help="Record kind to list (default: users)",
    )
    parser.add_argument("--insecure", action="store_true", help="Skip appliance certificate validation")
    parser.add_argument("--raw", action="store_true", help="Print the raw response body")
    args = parser.parse_args()

    password = args.password if args.password is not None else getpass.getpass("Password: ")

    try:
        credentials = IpoCredentials(
            host=args.host,
            username=args.username,
            password=password,
            allow_insecure_tls=args.insecure,
        )
    except ValueError as e:
        parser.error(str(e))

    success = asyncio.run(probe(credentials, IpoRecordKind[args.kind.upper()], show_raw=args.raw))
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
