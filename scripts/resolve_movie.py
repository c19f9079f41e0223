"""
Resolve movies against a live Open Douban API.

Usage:
    python scripts/resolve_movie.py "Harry Potter and the Sorcerer's Stone (2001)"
    python scripts/resolve_movie.py --sid 1295038
"""

import argparse
import asyncio

from dotenv import load_dotenv

# Load env vars
load_dotenv()

from opendouban.config import Settings
from opendouban.identification import MovieMetadataProvider, MovieQuery, OddbClientError


async def main(args: argparse.Namespace):
    settings = Settings.from_env()
    print(f"Upstream API: {settings.api_base_uri}")
    provider = MovieMetadataProvider.from_settings(settings)

    queries = [MovieQuery(sid=args.sid)] if args.sid else [MovieQuery(title=t) for t in args.titles]

    try:
        for query in queries:
            print(f"Query: sid={query.sid!r} title={query.title!r}")
            try:
                result = await provider.resolve_metadata(query)
                if result.has_metadata:
                    record = result.record
                    print(f"✅ Found: {record.name} ({record.production_year})")
                    print(f"   IDs: {record.provider_ids}")
                    for person in record.people[:5]:
                        print(f"   - {person.name}: {person.role}")
                else:
                    print("❌ No match found")
            except OddbClientError as e:
                print(f"⚠️ Error: {e}")
            print("-" * 30)
    finally:
        await provider.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Resolve movie metadata")
    parser.add_argument("titles", nargs="*", help="Titles to resolve")
    parser.add_argument("--sid", help="Resolve a subject id directly")
    args = parser.parse_args()

    if not args.sid and not args.titles:
        parser.error("give at least one title or --sid")

    asyncio.run(main(args))
