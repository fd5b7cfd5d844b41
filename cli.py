#!/usr/bin/env python3
import argparse
import sys
from typing import Any, Dict, Optional

import requests

DEFAULT_URL = "http://localhost:5000/api"


def post(url: str, payload: Optional[Dict[str, Any]] = None, timeout: float = 30) -> Optional[Dict[str, Any]]:
    """POST to the API and return the decoded JSON body."""
    try:
        response = requests.post(url, json=payload or {}, timeout=timeout)
        return response.json()
    except requests.exceptions.RequestException as e:
        print(f"Error: Could not connect to the API: {e}")
        return None
    except ValueError:
        print(f"Error: Unexpected response from {url}")
        return None


def print_devices(report: Dict[str, Any]) -> None:
    """Print a discovery report as a table."""
    devices = report.get("devices", [])
    networks = ", ".join(f"{n}.0/24" for n in report.get("scannedNetworks", []))
    print(f"\n🌐 Scanned networks: {networks}")
    print(f"   Probes issued: {report.get('totalScanned', 0)}")
    if not report.get("completed", True):
        print("   ⚠️  Scan stopped at its deadline; results are partial")

    if not devices:
        print("\nNo devices discovered")
        return

    print(f"\n📋 DISCOVERED DEVICES ({len(devices)} found)")
    print("=" * 80)
    for i, device in enumerate(devices, 1):
        port = device.get("recommendedPort")
        print(f"\n{i}. {device['displayName']}")
        print(f"   Type: {device['deviceType']}  Confidence: {device['confidenceScore']}%")
        print(f"   Open Ports: {', '.join(map(str, device['openPorts']))}")
        if port:
            print(f"   Recommended: {device['address']}:{port}")


def print_outcome(result: Optional[Dict[str, Any]]) -> bool:
    if result is None:
        return False
    if result.get("success"):
        print(f"✅ {result.get('message')}")
    else:
        print(f"❌ {result.get('message')}")
    if result.get("details"):
        print(f"   {result['details']}")
    return bool(result.get("success"))


def main():
    parser = argparse.ArgumentParser(description="CLI tool for the kitchen order printing service")
    parser.add_argument("--url", default=DEFAULT_URL,
                        help=f"API base URL (default: {DEFAULT_URL})")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("discover", help="Scan the local networks for printers")

    test_parser = subparsers.add_parser("test", help="Check that a printer accepts connections")
    test_parser.add_argument("ip", help="Printer IPv4 address")
    test_parser.add_argument("port", nargs="?", default="9100", help="Printer port (default: 9100)")

    print_parser = subparsers.add_parser("print-test", help="Create a test order and print it")
    print_parser.add_argument("ip", help="Printer IPv4 address")
    print_parser.add_argument("port", nargs="?", default="9100", help="Printer port (default: 9100)")

    args = parser.parse_args()
    base = args.url.rstrip("/")

    if args.command == "discover":
        print("🔍 Scanning local networks for printers, this can take a few minutes...")
        report = post(f"{base}/printer/discover", timeout=None)
        if report is None:
            sys.exit(1)
        print_devices(report)

    elif args.command == "test":
        print(f"🔌 Testing printer at {args.ip}:{args.port}...")
        ok = print_outcome(post(f"{base}/printer/test", {"ip": args.ip, "port": args.port}))
        sys.exit(0 if ok else 1)

    elif args.command == "print-test":
        order = post(f"{base}/test/order")
        if order is None or "id" not in order:
            print("❌ Could not create a test order")
            sys.exit(1)
        print(f"🖨️  Printing test order #{order['woocommerceId']} to {args.ip}:{args.port}...")
        ok = print_outcome(post(f"{base}/print", {
            "printerSettings": {"ipAddress": args.ip, "port": args.port, "name": "CLI"},
            "order": order,
        }))
        sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
