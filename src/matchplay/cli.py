"""Command line interface for Match Play.

Tournaments are kept in a JSON file between commands. Running ``matchplay``
without arguments starts an interactive shell.
"""

# Match Play
# Copyright (C) 2025  Match Play developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import argparse
import dataclasses
import random
import shlex
import sys
from pathlib import Path
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import NestedCompleter, WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from matchplay import formats
from matchplay.constants import BRACKET_GRAND_FINALS, SEEDING_RANDOM, SEEDING_SEEDED
from matchplay.exceptions import MatchPlayException
from matchplay.formats.bracket import round_name
from matchplay.models.config import FormatConfig, TournamentFormat
from matchplay.models.match import Match
from matchplay.models.standings import Standings
from matchplay.simulation import RandomResultSimulator, ResultPattern, SimulationConfig
from matchplay.storage import JsonFileStore
from matchplay.tournament.orchestrator import TournamentOrchestrator
from matchplay.utils import setup_logger

logger = setup_logger(__name__)

DEFAULT_FILE = "tournament.json"
FORMAT_CHOICES = [f.value for f in TournamentFormat]


# ANSI color codes for terminal output
class Colors:
    HEADER = "\033[95m"
    OKBLUE = "\033[94m"
    OKCYAN = "\033[96m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


# Command definitions with their options
COMMANDS = {
    "create": {
        "description": "Create a tournament and generate its matches",
        "options": {
            "--file": f"Tournament file (default: {DEFAULT_FILE})",
            "--format": "Format (" + "/".join(FORMAT_CHOICES) + ")",
            "--players": "Comma separated player names",
            "--matches-per-player": "Round robin matches per player",
            "--rounds": "Swiss rounds",
            "--seeding": "Bracket seeding (random/seeded)",
            "--third-place": "Add a third place match",
            "--grand-final-reset": "Play a reset if the losers side wins the grand final",
            "--groups": "Number of groups",
            "--per-group": "Players per group",
            "--advancing": "Players advancing per group",
            "--seed": "Random seed for reproducibility",
        },
    },
    "report": {
        "description": "Report the winner of one game",
        "options": {
            "--file": "Tournament file",
            "<match>": "Match id",
            "<game>": "Game number (1-3)",
            "<side>": "Winning side (1 or 2)",
        },
    },
    "standings": {
        "description": "Show the current standings",
        "options": {"--file": "Tournament file"},
    },
    "advance": {
        "description": "Pair the next Swiss round or start the playoffs",
        "options": {"--file": "Tournament file"},
    },
    "show": {
        "description": "List matches",
        "options": {
            "--file": "Tournament file",
            "--match": "Show a single match",
            "--pending": "Only matches waiting for results",
        },
    },
    "simulate": {
        "description": "Play a tournament with random results",
        "options": {
            "--format": "Format",
            "--players": "Number of players (default: 8)",
            "--pattern": "Result pattern (random/favourites/straight_sets)",
            "--seed": "Random seed",
            "--output": "Save the finished tournament to this file",
        },
    },
    "help": {
        "description": "Show help for specific command",
        "options": {"<command>": "Command name to get help for"},
    },
    "exit": {"description": "Exit the interactive mode", "options": {}},
}


def print_commands_list():
    """Print list of all available commands."""
    print(f"\n{Colors.BOLD}Available Commands:{Colors.ENDC}\n")
    for cmd, info in COMMANDS.items():
        print(f"  {Colors.OKGREEN}{cmd:15}{Colors.ENDC} - {info['description']}")
    print()


def print_command_help(command: str):
    """Print detailed help for a specific command."""
    if command not in COMMANDS:
        print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
        print_commands_list()
        return

    cmd_info = COMMANDS[command]
    print(f"\n{Colors.BOLD}{Colors.OKBLUE}Command: {command}{Colors.ENDC}")
    print(f"{Colors.BOLD}Description:{Colors.ENDC} {cmd_info['description']}\n")

    if cmd_info["options"]:
        print(f"{Colors.BOLD}Options:{Colors.ENDC}")
        for option, description in cmd_info["options"].items():
            print(f"  {Colors.OKCYAN}{option:22}{Colors.ENDC} {description}")
    print()


def create_completer() -> NestedCompleter:
    """Create autocomplete completer for interactive mode."""
    completions = {}
    for cmd, info in COMMANDS.items():
        options = [o for o in info["options"] if o.startswith("--")]
        completions[cmd] = WordCompleter(options) if options else None
    completions["help"] = WordCompleter(list(COMMANDS))
    return NestedCompleter.from_nested_dict(completions)


# ========== State file helpers ==========


def _store_for(path: Path) -> JsonFileStore:
    return JsonFileStore(path.parent)


def load_tournament(file: str) -> TournamentOrchestrator:
    path = Path(file)
    state = _store_for(path).load(path.stem)
    return TournamentOrchestrator.from_state(state)


def save_tournament(file: str, orchestrator: TournamentOrchestrator) -> None:
    path = Path(file)
    _store_for(path).save(path.stem, orchestrator.to_state())


def parse_players(raw: str) -> List[str]:
    """Split a comma separated roster, dropping empty names."""
    return [name.strip() for name in raw.split(",") if name.strip()]


def build_config(
    fmt: TournamentFormat, num_players: int, args: argparse.Namespace
) -> FormatConfig:
    """Format default config with any options given on the command line."""
    config = formats.default_config(fmt, num_players)
    overrides = {}
    if fmt is TournamentFormat.ROUND_ROBIN and args.matches_per_player is not None:
        overrides["matches_per_player"] = args.matches_per_player
    elif fmt is TournamentFormat.SWISS and args.rounds is not None:
        overrides["rounds"] = args.rounds
    elif fmt in (
        TournamentFormat.SINGLE_ELIMINATION,
        TournamentFormat.DOUBLE_ELIMINATION,
    ):
        if args.seeding is not None:
            overrides["seeding_method"] = args.seeding
        if fmt is TournamentFormat.SINGLE_ELIMINATION and args.third_place:
            overrides["third_place_match"] = True
        if fmt is TournamentFormat.DOUBLE_ELIMINATION and args.grand_final_reset:
            overrides["grand_final_reset"] = True
    elif fmt is TournamentFormat.GROUP_STAGE:
        if args.groups is not None:
            overrides["num_groups"] = args.groups
        if args.per_group is not None:
            overrides["players_per_group"] = args.per_group
        if args.advancing is not None:
            overrides["advancing_per_group"] = args.advancing
    return dataclasses.replace(config, **overrides)


# ========== Output ==========


def describe_match(orchestrator: TournamentOrchestrator, match: Match) -> str:
    players = orchestrator.players

    def name(index: Optional[int]) -> str:
        return players[index] if index is not None else "TBD"

    label = match.bracket_position or (f"Round {match.round}" if match.round else "")
    if match.group:
        label = f"Group {match.group}"
    elif orchestrator.format is TournamentFormat.SINGLE_ELIMINATION and match.round:
        total = max(m.round or 0 for m in orchestrator.matches)
        label = (
            "3rd Place" if match.is_third_place else round_name(match.round, total)
        )
    elif match.bracket == BRACKET_GRAND_FINALS:
        label = "Grand Final Reset" if match.is_conditional else "Grand Final"

    if match.is_bye:
        return f"#{match.id:<4} {label:<16} {name(match.player1)} (bye)"

    games = " ".join("-" if g is None else str(g) for g in match.games)
    status = ""
    if match.winner is not None:
        status = f"{Colors.OKGREEN}winner: {name(match.winner_index)}{Colors.ENDC}"
    elif match.is_placeholder:
        status = f"{Colors.WARNING}waiting{Colors.ENDC}"
    return (
        f"#{match.id:<4} {label:<16} {name(match.player1)} vs {name(match.player2)}"
        f"  [{games}]  {status}"
    )


def print_standings(standings: Standings, fmt: TournamentFormat) -> None:
    print(f"\n{Colors.BOLD}Standings:{Colors.ENDC}")
    for row in standings.ranked_rows:
        tie = "=" if row.rank in standings.tied_ranks else " "
        line = (
            f"  {row.rank:>3}{tie} {row.player:<20} "
            f"W {row.wins:<3} L {row.losses:<3} GW {row.games_won:<3} GL {row.games_lost:<3}"
        )
        if fmt is TournamentFormat.SWISS:
            line += f" Pts {row.points:<5g} OMW {row.omw:.3f} GW% {row.gwp:.3f}"
        elif fmt.is_elimination or row.depth:
            line += f" Depth {row.depth}"
            if row.final_position is not None:
                line += f" Place {row.final_position}"
        else:
            line += f" Pts {row.points:<6g} Q {row.quality_score:g}"
        if row.group:
            line += f" Group {row.group}"
            if row.group_rank is not None:
                line += f"#{row.group_rank}"
        print(line)
    print()


# ========== Commands ==========


def run_create_command(args: argparse.Namespace) -> int:
    """Run the create command."""
    players = parse_players(args.players)
    fmt = TournamentFormat.from_value(args.format)
    config = build_config(fmt, len(players), args)

    rng = random.Random(args.seed) if args.seed is not None else None
    orchestrator = TournamentOrchestrator(rng=rng)
    matches = orchestrator.create(players, fmt, config)
    save_tournament(args.file, orchestrator)

    info = orchestrator.format_info()
    print(f"\n{Colors.OKGREEN}Created {info['name']} with {len(players)} players, "
          f"{len(matches)} matches{Colors.ENDC}")
    print(f"Saved to: {args.file}")
    return 0


def run_report_command(args: argparse.Namespace) -> int:
    """Run the report command."""
    orchestrator = load_tournament(args.file)
    report = orchestrator.report_game_result(args.match, args.game - 1, args.side)
    if report.error:
        print(f"{Colors.FAIL}Error: {report.error}{Colors.ENDC}")
        return 1

    save_tournament(args.file, orchestrator)
    print(describe_match(orchestrator, report.match))
    if orchestrator.can_advance_stage():
        print(f"{Colors.OKCYAN}Stage complete, run 'advance' to continue{Colors.ENDC}")
    elif orchestrator.is_complete():
        print(f"{Colors.OKGREEN}Tournament complete{Colors.ENDC}")
    return 0


def run_standings_command(args: argparse.Namespace) -> int:
    orchestrator = load_tournament(args.file)
    print_standings(orchestrator.get_standings(), orchestrator.format)
    return 0


def run_advance_command(args: argparse.Namespace) -> int:
    """Run the advance command."""
    orchestrator = load_tournament(args.file)
    result = orchestrator.advance_stage()
    if not result.success:
        print(f"{Colors.FAIL}Cannot advance: {result.error}{Colors.ENDC}")
        return 1

    save_tournament(args.file, orchestrator)
    if result.round is not None:
        print(f"{Colors.OKGREEN}Paired round {result.round}{Colors.ENDC}")
    if result.stage is not None:
        seeds = ", ".join(orchestrator.players[p] for p in result.advancing_players)
        print(f"{Colors.OKGREEN}Entered {result.stage}: {seeds}{Colors.ENDC}")
    return 0


def run_show_command(args: argparse.Namespace) -> int:
    """Run the show command."""
    orchestrator = load_tournament(args.file)
    if args.match is not None:
        match = orchestrator.get_match(args.match)
        if match is None:
            print(f"{Colors.FAIL}Error: match not found{Colors.ENDC}")
            return 1
        print(describe_match(orchestrator, match))
        return 0

    for match in orchestrator.matches:
        if args.pending and (match.winner is not None or not match.is_ready):
            continue
        print(describe_match(orchestrator, match))

    progress = orchestrator.get_progress()
    print(
        f"\n{progress['completed']}/{progress['total']} matches complete "
        f"({progress['percentage']}%)"
    )
    return 0


def run_simulate_command(args: argparse.Namespace) -> int:
    """Run the simulate command."""
    config = SimulationConfig(
        num_players=args.players,
        format=TournamentFormat.from_value(args.format),
        result_pattern=ResultPattern(args.pattern),
        seed=args.seed,
    )

    print(f"\n{Colors.BOLD}Simulating tournament...{Colors.ENDC}")
    result = RandomResultSimulator(config).run()

    print(f"  Games reported: {result.games_reported}")
    print(f"  Stage advances: {result.stages_advanced}")
    print(f"  Completed: {result.completed}")
    if result.champion is not None:
        print(
            f"  {Colors.OKGREEN}Winner: "
            f"{result.orchestrator.players[result.champion]}{Colors.ENDC}"
        )
    print_standings(result.standings, config.format)

    if args.output:
        save_tournament(args.output, result.orchestrator)
        print(f"{Colors.OKGREEN}Tournament saved to: {args.output}{Colors.ENDC}")
    return 0 if result.completed else 1


# ========== Parsers ==========


def create_main_parser() -> argparse.ArgumentParser:
    """Create main argument parser."""
    parser = argparse.ArgumentParser(
        prog="matchplay",
        description="Run best-of-three match play tournaments",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive mode
  matchplay

  # Eight player Swiss over three rounds
  matchplay create --format swiss --players A,B,C,D,E,F,G,H --rounds 3

  # Player 1 of match 0 wins game 1
  matchplay report 0 1 1

  # Play out a double elimination bracket
  matchplay simulate --format double-elimination --players 8 --seed 7
        """,
    )
    parser.add_argument(
        "--interactive", "-i", action="store_true", help="Start in interactive mode"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    create_parser = subparsers.add_parser("create", help="Create a tournament")
    create_parser.add_argument("--file", default=DEFAULT_FILE)
    create_parser.add_argument("--format", choices=FORMAT_CHOICES, required=True)
    create_parser.add_argument("--players", required=True)
    create_parser.add_argument("--matches-per-player", type=int)
    create_parser.add_argument("--rounds", type=int)
    create_parser.add_argument("--seeding", choices=[SEEDING_RANDOM, SEEDING_SEEDED])
    create_parser.add_argument("--third-place", action="store_true")
    create_parser.add_argument("--grand-final-reset", action="store_true")
    create_parser.add_argument("--groups", type=int)
    create_parser.add_argument("--per-group", type=int)
    create_parser.add_argument("--advancing", type=int)
    create_parser.add_argument("--seed", type=int)
    create_parser.set_defaults(func=run_create_command)

    report_parser = subparsers.add_parser("report", help="Report a game result")
    report_parser.add_argument("--file", default=DEFAULT_FILE)
    report_parser.add_argument("match", type=int)
    report_parser.add_argument("game", type=int, choices=[1, 2, 3])
    report_parser.add_argument("side", type=int, choices=[1, 2])
    report_parser.set_defaults(func=run_report_command)

    standings_parser = subparsers.add_parser("standings", help="Show standings")
    standings_parser.add_argument("--file", default=DEFAULT_FILE)
    standings_parser.set_defaults(func=run_standings_command)

    advance_parser = subparsers.add_parser("advance", help="Advance the stage")
    advance_parser.add_argument("--file", default=DEFAULT_FILE)
    advance_parser.set_defaults(func=run_advance_command)

    show_parser = subparsers.add_parser("show", help="List matches")
    show_parser.add_argument("--file", default=DEFAULT_FILE)
    show_parser.add_argument("--match", type=int)
    show_parser.add_argument("--pending", action="store_true")
    show_parser.set_defaults(func=run_show_command)

    sim_parser = subparsers.add_parser("simulate", help="Simulate a tournament")
    sim_parser.add_argument("--format", choices=FORMAT_CHOICES, required=True)
    sim_parser.add_argument("--players", type=int, default=8)
    sim_parser.add_argument(
        "--pattern", choices=[p.value for p in ResultPattern], default="random"
    )
    sim_parser.add_argument("--seed", type=int)
    sim_parser.add_argument("--output")
    sim_parser.set_defaults(func=run_simulate_command)

    return parser


def run_command(parser: argparse.ArgumentParser, argv: List[str]) -> int:
    """Parse ``argv`` and run the selected subcommand."""
    args = parser.parse_args(argv)
    if getattr(args, "interactive", False):
        return run_interactive_mode()
    if not hasattr(args, "func"):
        parser.print_help()
        return 0
    try:
        return args.func(args)
    except MatchPlayException as e:
        print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
        logger.debug("Command failed", exc_info=True)
        return 1


def run_interactive_mode() -> int:
    """Run the interactive shell."""
    print(
        f"{Colors.OKBLUE}Match Play interactive shell{Colors.ENDC}\n"
        f"Type {Colors.BOLD}help{Colors.ENDC} to see all available commands\n"
        f"Type {Colors.BOLD}exit{Colors.ENDC} or {Colors.BOLD}quit{Colors.ENDC} "
        "to leave interactive mode\n"
    )
    style = Style.from_dict({"prompt": "#00aa00 bold"})
    session = PromptSession(
        completer=create_completer(),
        history=InMemoryHistory(),
        style=style,
    )
    parser = create_main_parser()

    while True:
        try:
            user_input = session.prompt("matchplay> ").strip()
            if not user_input:
                continue

            if user_input in ["exit", "quit", "q"]:
                print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
                break

            parts = shlex.split(user_input)
            command = parts[0].lstrip("/")

            if command in ["help", "?"]:
                if len(parts) > 1:
                    print_command_help(parts[1].lstrip("/"))
                else:
                    print_commands_list()
                continue

            if command not in COMMANDS:
                print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
                print(f"Type {Colors.BOLD}help{Colors.ENDC} to see available commands")
                continue

            try:
                run_command(parser, [command] + parts[1:])
            except SystemExit:
                # argparse exits on bad arguments
                continue

        except KeyboardInterrupt:
            print(f"\n{Colors.WARNING}Use 'exit' or 'quit' to leave{Colors.ENDC}")
        except EOFError:
            print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
            break
        except ValueError as e:
            # unbalanced quotes from shlex
            print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the matchplay CLI."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        return run_interactive_mode()
    return run_command(create_main_parser(), argv)
