from __future__ import annotations

import argparse
from pathlib import Path

from sqlmodel import Session

from community_moderation.db.init_db import init_db
from community_moderation.db.session import engine
from community_moderation.services.moderator_seed import load_moderator_seeds, seed_moderators


def main() -> None:
    parser = argparse.ArgumentParser(description='Seed moderator profiles from a JSON file.')
    parser.add_argument(
        '--path',
        default=str(Path(__file__).resolve().parents[1] / 'seeds' / 'moderators.json'),
        help='Path to moderators JSON file',
    )
    parser.add_argument('--dry-run', action='store_true', help='Validate only, do not write to DB')
    args = parser.parse_args()

    path = Path(args.path).expanduser()
    seeds = load_moderator_seeds(path)
    if args.dry_run:
        print(f"validated {len(seeds)} moderator seeds")
        return

    init_db()
    with Session(engine) as session:
        summary = seed_moderators(session, seeds)
    print(f"seeded moderators: created={summary.created} updated={summary.updated} skipped={summary.skipped}")


if __name__ == '__main__':
    main()
