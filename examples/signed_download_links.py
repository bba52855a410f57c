#!/usr/bin/env python3
"""
Signed Download Links Example
=============================

Demonstrates issuing a time-limited download link and checking it later,
the way a web handler would before serving a file.
"""

import logging
from datetime import datetime, timedelta, timezone

from urlsigner import Expired, InvalidSignature, create_signer

logging.basicConfig(level=logging.INFO)


def main():
    signer = create_signer("change-me-in-production")

    link = signer.sign_url_with_ttl(
        "https://files.example.com/reports/q3.pdf?user=42", timedelta(minutes=15)
    )
    print(f"Download link: {link}")

    # Serving side
    signer.verify_url(link)
    print("✓ Link verified")

    tampered = link.replace("user=42", "user=43")
    try:
        signer.verify_url(tampered)
    except InvalidSignature:
        print("✓ Tampered link rejected")

    # Pretend an hour has passed
    later = datetime.now(timezone.utc) + timedelta(hours=1)
    future_signer = create_signer("change-me-in-production", clock=lambda: later)
    try:
        future_signer.verify_url(link)
    except Expired:
        print("✓ Expired link rejected")


if __name__ == "__main__":
    main()
