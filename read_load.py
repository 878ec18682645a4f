"""
read_load.py - simple async load script for the public read path

Hits /api/resolve/{id} (default) or the short-link entry point /{id} for
IDs taken from a JSONL file written by seed_duplicates.py.

Usage:
  python read_load.py --base http://127.0.0.1:8000 --in links_created.jsonl --count 15000 --concurrency 200
  python read_load.py --mode follow ...
"""
import argparse
import asyncio
import json
import random
import time
from datetime import datetime, timezone

import httpx

def _now_iso():
    return datetime.now(timezone.utc).isoformat()

def _load_codes(path):
    codes = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            try:
                obj = json.loads(line)
            except ValueError:
                continue
            c = obj.get("code")
            if c:
                codes.append(c)
    return codes

async def _hit_one(client: httpx.AsyncClient, base: str, code: str, mode: str):
    path = f"/api/resolve/{code}" if mode == "resolve" else f"/{code}"
    try:
        r = await client.get(f"{base}{path}", follow_redirects=False, timeout=10)
        # 200 (resolve / interstitial) or 302 (direct redirect)
        return 200 <= r.status_code < 400
    except httpx.HTTPError:
        return False

async def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--base", default="http://127.0.0.1:8000")
    parser.add_argument("--in", dest="codes_file", default="links_created.jsonl")
    parser.add_argument("--count", type=int, default=15000)
    parser.add_argument("--concurrency", type=int, default=200)
    parser.add_argument("--mode", choices=["resolve", "follow"], default="resolve")
    args = parser.parse_args()

    codes = _load_codes(args.codes_file)
    if not codes:
        print(f"No IDs found in {args.codes_file}. Run seed_duplicates.py first.")
        return

    start_iso = _now_iso()
    t0 = time.perf_counter()
    success = 0

    limit = httpx.Limits(max_connections=args.concurrency, max_keepalive_connections=args.concurrency)
    async with httpx.AsyncClient(limits=limit) as client:
        sem = asyncio.Semaphore(args.concurrency)

        async def _task(i):
            nonlocal success
            async with sem:
                ok = await _hit_one(client, args.base, random.choice(codes), args.mode)
                if ok:
                    success += 1

        await asyncio.gather(*(_task(i) for i in range(args.count)))

    dt = time.perf_counter() - t0
    end_iso = _now_iso()
    print(f"START: {start_iso}")
    print(f"END:   {end_iso}")
    print(f"TOTAL: {dt:.3f} s")
    print(f"OPS:   reads={args.count}, ok={success}, fail={args.count - success}")
    if dt > 0:
        print(f"RPS:   {success/dt:.1f} req/s")

if __name__ == "__main__":
    asyncio.run(main())
