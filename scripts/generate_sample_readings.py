#!/usr/bin/env python3
"""
Simulate a fleet of ethylene monitors uploading readings.
Posts N hours of history per device with natural-looking daily curves.
"""
import argparse
import math
import random
from datetime import datetime, timedelta, timezone

import requests

DEVICE_IDS = ["cold-room-1", "cold-room-2", "ripening-bay", "loading-dock"]

# Per-device base values
PROFILES = {
    "cold-room-1": {"temperature": 4.0, "humidity": 90.0, "ethylene_level": 0.2},
    "cold-room-2": {"temperature": 6.0, "humidity": 88.0, "ethylene_level": 0.4},
    "ripening-bay": {"temperature": 18.0, "humidity": 85.0, "ethylene_level": 8.0},
    "loading-dock": {"temperature": 14.0, "humidity": 70.0, "ethylene_level": 1.0},
}


def generate_reading(t_hours: float, profile: dict) -> dict:
    """Readings at t hours from start of the run."""
    hour_of_day = (6 + t_hours) % 24
    daily = math.sin((hour_of_day - 6) * math.pi / 12)

    temperature = profile["temperature"] + daily * 2.0 + random.gauss(0, 0.3)
    # Humidity runs opposite to temperature
    humidity = profile["humidity"] - daily * 5.0 + random.gauss(0, 1.0)
    # Ethylene accumulates slowly and is vented every 6 hours
    ethylene = profile["ethylene_level"] * (1 + (t_hours % 6) / 6) + random.gauss(0, 0.05)

    return {
        "temperature": round(temperature, 2),
        "humidity": round(max(0.0, min(100.0, humidity)), 2),
        "ethylene_level": round(max(0.0, ethylene), 3),
    }


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Upload simulated sensor readings")
    parser.add_argument("--api-url", default="http://localhost:8080", help="Base URL of the API")
    parser.add_argument("--path", default="/sensors", help="Upload path")
    parser.add_argument("--devices", type=positive_int, default=len(DEVICE_IDS), help="Number of devices to simulate")
    parser.add_argument("--hours", type=positive_int, default=24, help="Hours of history to generate")
    parser.add_argument("--interval-minutes", type=positive_int, default=15, help="Minutes between readings")
    return parser


def main():
    args = build_parser().parse_args()

    devices = DEVICE_IDS[: max(1, min(args.devices, len(DEVICE_IDS)))]
    now = datetime.now(timezone.utc)
    steps = args.hours * 60 // args.interval_minutes

    session = requests.Session()
    session.headers["User-Agent"] = "peer-sample-generator/1.0"

    total = 0
    for device_id in devices:
        profile = PROFILES[device_id]
        ok = 0
        for i in range(steps):
            t_hours = i * args.interval_minutes / 60
            ts = now - timedelta(hours=args.hours) + timedelta(hours=t_hours)
            payload = {"device_id": device_id, "is_backedup": False, "created_at": int(ts.timestamp())}
            payload.update(generate_reading(t_hours, profile))
            try:
                res = session.post(f"{args.api_url}{args.path}", json=payload, timeout=10)
            except requests.RequestException as e:
                print(f"  Connection error: {e}")
                return
            if res.status_code == 200:
                ok += 1
            else:
                print(f"  Error {res.status_code}: {res.text}")
        total += ok
        print(f"{device_id}: uploaded {ok}/{steps} readings")

    print(f"Done: {total} readings uploaded")


if __name__ == "__main__":
    main()
