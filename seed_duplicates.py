"""
seed_duplicates.py - create links with repeated destinations, then merge

Creates `--count` links whose URLs cycle through `--distinct` destinations.
Creates after the first per destination are auto-merged into aliases by the
API; the final /api/merge call should then report 0. IDs and URLs are
written to a JSONL file usable by read_load.py.

Usage:
  python seed_duplicates.py --base http://127.0.0.1:8000 --password 'admin-pass' \
      --count 500 --distinct 50 --concurrency 20 --out links_created.jsonl
"""
import argparse
import asyncio
import json
import time
from datetime import datetime, timezone

import httpx

def _now_iso():
    return datetime.now(timezone.utc).isoformat()

async def _login(client: httpx.AsyncClient, base: str, password: str) -> str:
    r = await client.post(f"{base}/api/auth", json={"password": password}, timeout=10)
    r.raise_for_status()
    return r.json()["token"]

async def _create_one(client: httpx.AsyncClient, base: str, idx: int, distinct: int, prefix: str):
    link_id = f"{prefix}{idx:06d}"
    url = f"https://example.com/dest/{idx % distinct}"
    try:
        r = await client.post(f"{base}/api/links", json={"id": link_id, "url": url}, timeout=10)
        r.raise_for_status()
        return link_id, url, bool(r.json().get("merged"))
    except httpx.HTTPError:
        return None

async def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--base", default="http://127.0.0.1:8000")
    parser.add_argument("--password", default="")
    parser.add_argument("--count", type=int, default=500)
    parser.add_argument("--distinct", type=int, default=50)
    parser.add_argument("--concurrency", type=int, default=20)
    parser.add_argument("--prefix", default="sd")
    parser.add_argument("--out", default="links_created.jsonl")
    args = parser.parse_args()

    start_iso = _now_iso()
    t0 = time.perf_counter()
    created = merged = failed = 0

    limit = httpx.Limits(max_connections=args.concurrency, max_keepalive_connections=args.concurrency)
    async with httpx.AsyncClient(limits=limit) as client:
        if args.password:
            token = await _login(client, args.base, args.password)
            client.headers["Authorization"] = f"Bearer {token}"

        sem = asyncio.Semaphore(args.concurrency)

        async def _task(i):
            async with sem:
                return await _create_one(client, args.base, i, max(1, args.distinct), args.prefix)

        results = await asyncio.gather(*(_task(i) for i in range(args.count)))

        with open(args.out, "w", encoding="utf-8") as out_f:
            for result in results:
                if result is None:
                    failed += 1
                    continue
                link_id, url, was_merged = result
                merged += was_merged
                created += not was_merged
                out_f.write(json.dumps({"code": link_id, "url": url}) + "\n")

        r = await client.post(f"{args.base}/api/merge", json={}, timeout=60)
        r.raise_for_status()
        post_merge = r.json()["merged"]

    dt = time.perf_counter() - t0
    print(f"START:   {start_iso}")
    print(f"END:     {_now_iso()}")
    print(f"TOTAL:   {dt:.3f} s")
    print(f"OPS:     writes={args.count}, canonical={created}, auto_merged={merged}, fail={failed}")
    # Concurrent creates of one URL can race past auto-merge; merge cleans those up.
    print(f"MERGE:   {post_merge} duplicate(s) absorbed by /api/merge")

if __name__ == "__main__":
    asyncio.run(main())
