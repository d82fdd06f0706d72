#!/usr/bin/env python3
"""
Caster Tax Report Analyzer

Estimates a Black Mage's spell speed and caster tax from an FF Logs report,
or from a JSON file of combat events exported earlier.

Usage:
    python scripts/analyze_report.py --code aBcD1234 --list              # List fights and players
    python scripts/analyze_report.py --code aBcD1234 --fight 3 --actor 7  # Analyze one player
    python scripts/analyze_report.py --code aBcD1234 --fight 3 --actor 7 --save events.json
    python scripts/analyze_report.py --events events.json --actor 7      # Analyze saved events

The FF Logs v1 API key is read from FFLOGS_API_KEY (a .env file works too).
"""

import sys
import json
import asyncio
import argparse
from pathlib import Path

from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).parent.parent))

load_dotenv()

from app.services.combat_events import CombatEvent, EventType
from app.services.encounter_replay import replay_encounter
from app.services.errors import EventOrderError, ReportError
from app.services.report_store import ReportStore
from app.services.statistics import Statistics, format_duration


def load_events(path: Path) -> list:
    """Load events saved with --save."""
    with open(path) as f:
        data = json.load(f)
    return [CombatEvent(**{**e, "type": EventType(e["type"])}) for e in data]


def save_events(events: list, path: Path):
    data = [{**e.__dict__, "type": e.type.value} for e in events]
    with open(path, 'w') as f:
        json.dump(data, f, indent=2)
    print(f"Saved {len(events)} events to {path}")


def print_analysis(events: list, actor_id: int):
    statistics = Statistics()
    try:
        analyser = replay_encounter(events, actor_id, statistics=statistics)
    except EventOrderError as e:
        print(f"Events out of order: {e}")
        return

    report = analyser.report
    print(f"\n{'='*50}")
    print(f"CASTER TAX - actor {actor_id}")
    print(f"{'='*50}")
    print(f"Cast windows: {report.record_count} ({report.used_record_count} usable)")

    if report.timing is None:
        print(f"Not enough data: {report.insufficient_data_reason}")
        return

    for title, value in statistics.as_dict().items():
        print(f"{title}: {value}")
    print(f"Mean GCD leftover: {format_duration(report.evaluation.leftover_mean, 3)}")
    print(f"Casts kept after queue filtering: {report.evaluation.queued_count}")
    if report.spell_speed_floor is not None:
        print(f"Spell speed floor from tightest cast: {report.spell_speed_floor}")


async def list_report(store: ReportStore, code: str):
    report = await store.fetch_report_if_needed(code)
    if report is None:
        print(f"Error: {store.error}")
        return

    print(f"{report.title} ({report.code})")
    print("\nFights:")
    for fight in report.fights:
        outcome = "kill" if fight.kill else ("wipe" if fight.kill is False else "-")
        print(f"  {fight.id:>3}  {fight.name:<30} {format_duration(fight.duration_ms):>8}  {outcome}")

    print("\nPlayers:")
    for actor in report.friendlies:
        print(f"  {actor.id:>3}  {actor.name:<30} {actor.type}")


async def fetch_events(store: ReportStore, code: str, fight_id: int, actor_id: int):
    report = await store.fetch_report_if_needed(code)
    if report is None:
        print(f"Error: {store.error}")
        return None

    fight = report.get_fight(fight_id)
    if fight is None:
        print(f"Fight {fight_id} not found in report {code}")
        return None

    print(f"Fetching events for {fight.name} ({format_duration(fight.duration_ms)})...")
    try:
        return await store.fetch_fight_events(fight, actor_id)
    except ReportError as e:
        print(f"Error: {e}")
        return None


async def main():
    parser = argparse.ArgumentParser(description='Estimate spell speed and caster tax')
    parser.add_argument('--code', type=str, help='FF Logs report code')
    parser.add_argument('--fight', type=int, help='Fight ID within the report')
    parser.add_argument('--actor', type=int, help='Actor ID of the Black Mage')
    parser.add_argument('--list', action='store_true', help='List fights and players')
    parser.add_argument('--events', type=Path, help='Analyze a saved event file instead')
    parser.add_argument('--save', type=Path, help='Save fetched events to this file')
    args = parser.parse_args()

    if args.events:
        if args.actor is None:
            parser.error('--events requires --actor')
        print_analysis(load_events(args.events), args.actor)
        return

    if not args.code:
        parser.print_help()
        return

    store = ReportStore()
    try:
        if args.list or args.fight is None or args.actor is None:
            await list_report(store, args.code)
            return

        events = await fetch_events(store, args.code, args.fight, args.actor)
        if events is None:
            return
        if args.save:
            save_events(events, args.save)
        print_analysis(events, args.actor)
    finally:
        await store.client.close()


if __name__ == '__main__':
    asyncio.run(main())
