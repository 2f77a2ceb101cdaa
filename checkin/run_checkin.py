"""
run_checkin.py - Main Application Entry Point
==============================================
Interactive terminal front end for looking attendees up and checking them in.

What it does:
-------------
1. Loads configuration from environment variables (.env file)
2. Loads the responder name index for autocomplete
3. If a deep link (or a --unique-id / --name / --email flag) is given,
   looks it up immediately and locks the session to that lookup
4. Otherwise reads commands from the terminal

Usage:
------
    python -m checkin.run_checkin
    python -m checkin.run_checkin --url "https://example.org/checkin?uniqueId=AB12"
    python -m checkin.run_checkin --name "John Doe" --debug

Commands:
---------
    by <uniqueId|name|email>  : choose what to search by
    type <text>               : set the search term (suggests names when searching by name)
    pick <n>                  : use suggestion n as the search term
    search [term]             : look the term up
    esc                       : hide suggestions
    list                      : show the current attendees
    toggle <uniqueId>         : select / unselect an attendee
    all / clear               : select every eligible attendee / nobody
    checkin                   : check the selected attendees in
    refresh                   : repeat the current lookup
    quit                      : leave
"""

import argparse
import asyncio
import logging
import sys
from typing import Callable, Dict

from .autocomplete import KEY_ENTER, KEY_ESCAPE, AutocompleteFilter
from .config import Settings, load_settings
from .coordinator import CheckInCoordinator
from .http_client import HttpClient
from .models import SearchCriteria
from .name_index import NameIndex
from .report import render_attendees
from .selector import parse_query, select_deep_link


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

LOG_LEVEL = logging.INFO

PROMPT = "checkin> "

# Commands that edit the search input; refused for deep-linked sessions
MANUAL_COMMANDS = {"by", "type", "pick", "search", "esc"}


# =============================================================================
# LOGGING SETUP
# =============================================================================

logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%H:%M:%S'
)

logger = logging.getLogger(__name__)


# =============================================================================
# INTERACTIVE SESSION
# =============================================================================

class InteractiveSession:
    """
    Maps terminal commands onto the coordinator and the autocomplete filter.

    Set `pre_addressed` once a deep link has been looked up; from then on
    the search input commands are unavailable.
    """

    def __init__(self, coordinator: CheckInCoordinator, autocomplete: AutocompleteFilter,
                 out: Callable[[str], None] = print):
        self.coordinator = coordinator
        self.autocomplete = autocomplete
        self.out = out
        self.pre_addressed = False

    async def bootstrap(self, params: Dict[str, str]) -> bool:
        """Look up the deep link in `params`, if there is one."""
        link = select_deep_link(params)
        if link is None:
            return False

        logger.info(f"Deep link: {link.criteria.value}={link.term!r}")
        self.pre_addressed = True
        self.autocomplete.set_criteria(link.criteria)
        self.autocomplete.term = link.term
        await self.coordinator.resolve(link.criteria, link.term)
        self.show()
        return True

    async def handle(self, line: str) -> bool:
        """Run one command. Returns False when the session should end."""
        parts = line.strip().split(maxsplit=1)
        if not parts:
            return True

        command = parts[0].lower()
        rest = parts[1].strip() if len(parts) > 1 else ""
        args = rest.split()

        if command in ("quit", "exit"):
            return False

        if command in MANUAL_COMMANDS and self.pre_addressed:
            self.out("Search input is disabled for this link.")
            return True

        if command == "by":
            self._switch_criteria(rest)
        elif command == "type":
            self._type(rest)
        elif command == "pick":
            self._pick(rest)
        elif command == "search":
            if args:
                self.autocomplete.on_input(rest)
            if self.autocomplete.handle_key(KEY_ENTER):
                await self.coordinator.resolve(self.autocomplete.criteria, self.autocomplete.term)
                self.show()
        elif command == "esc":
            self.autocomplete.handle_key(KEY_ESCAPE)
        elif command == "list":
            self.show()
        elif command == "toggle":
            for unique_id in args:
                if not self.coordinator.toggle(unique_id):
                    self.out(f"{unique_id} cannot be selected.")
            self.show()
        elif command == "all":
            self.coordinator.select_all_eligible()
            self.show()
        elif command == "clear":
            self.coordinator.clear_selection()
            self.show()
        elif command == "checkin":
            await self.coordinator.submit()
            self.show()
        elif command == "refresh":
            await self.coordinator.refresh()
            self.show()
        elif command == "help":
            self.out(__doc__.split("Commands:")[1].strip("\n-"))
        else:
            self.out(f"Unknown command: {command} (try 'help')")
        return True

    def show(self):
        """Print the message (if any) and the attendee list (if any)."""
        if self.coordinator.message:
            self.out(self.coordinator.message)
        table = render_attendees(self.coordinator.attendees, self.coordinator.selected_ids)
        if table:
            self.out(table)

    def _switch_criteria(self, text: str):
        try:
            criteria = SearchCriteria.parse(text)
        except ValueError as e:
            self.out(str(e))
            return
        self.autocomplete.set_criteria(criteria)
        self.out(f"Searching by {criteria.label}.")

    def _type(self, text: str):
        suggestions = self.autocomplete.on_input(text)
        if self.autocomplete.visible:
            if not suggestions:
                self.out("No matching names.")
            for i, name in enumerate(suggestions, start=1):
                self.out(f"  {i}. {name}")

    def _pick(self, text: str):
        suggestions = self.autocomplete.suggestions
        if not self.autocomplete.visible or not text.isdigit() \
                or not 1 <= int(text) <= len(suggestions):
            self.out("No such suggestion.")
            return
        self.autocomplete.choose(suggestions[int(text) - 1])
        self.out(f"Search term: {self.autocomplete.term}")


# =============================================================================
# COMMAND LINE ARGUMENT PARSING
# =============================================================================

def parse_arguments(argv=None):
    """
    Parse command-line arguments.

    Returns:
        Namespace object with the parsed arguments:
        - url: Deep link or query string
        - unique_id / name / email: Individual deep-link parameters
        - debug: Boolean, if True enable debug logging
    """
    parser = argparse.ArgumentParser(
        description='Look up guest-list entries and check attendees in',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m checkin.run_checkin
  python -m checkin.run_checkin --url "https://example.org/?uniqueId=AB12"
  python -m checkin.run_checkin --email alice@example.com
        """
    )

    parser.add_argument('--url', help='Deep link URL or query string to look up on start')
    parser.add_argument('--unique-id', dest='unique_id', help='Look up this Unique ID on start')
    parser.add_argument('--name', help='Look up this responder name on start')
    parser.add_argument('--email', help='Look up this email address on start')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    return parser.parse_args(argv)


def deep_link_params(args) -> Dict[str, str]:
    """Query parameters from --url, with explicit flags taking their place."""
    params = parse_query(args.url) if args.url else {}
    flags = {
        SearchCriteria.UNIQUE_ID.value: args.unique_id,
        SearchCriteria.NAME.value: args.name,
        SearchCriteria.EMAIL.value: args.email,
    }
    params.update({key: value for key, value in flags.items() if value})
    return params


# =============================================================================
# MAIN EXECUTION FUNCTIONS
# =============================================================================

async def run_session(settings: Settings, params: Dict[str, str], client: HttpClient,
                      read_line: Callable[[str], str] = input):
    """
    Serve one check-in session until quit/EOF.

    The name index loads in the background so a slow `name=ALL` request never
    holds up the deep-link lookup or the prompt; suggestions simply stay empty
    until it arrives.
    """
    index = NameIndex()
    loading = asyncio.create_task(index.load(client, timeout=settings.timeout_sec))

    coordinator = CheckInCoordinator(client, timeout=settings.timeout_sec)
    autocomplete = AutocompleteFilter(index, limit=settings.suggestion_limit)
    session = InteractiveSession(coordinator, autocomplete)

    try:
        await session.bootstrap(params)

        while True:
            # Reading the terminal blocks, so it runs off the event loop
            try:
                line = await asyncio.to_thread(read_line, PROMPT)
            except EOFError:
                break
            if not await session.handle(line):
                break
    finally:
        # Bounded by the timeout; never leave the task dangling
        await loading


def run_checkin(argv=None) -> int:
    """
    Main execution logic for the check-in client.

    Returns:
        Process exit code: 0 normal, 1 configuration error, 130 interrupted
    """
    args = parse_arguments(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    client = None

    try:
        settings = load_settings()
        logger.info(f"Lookup URL: {settings.lookup_url}")

        client = HttpClient(settings)
        asyncio.run(run_session(settings, deep_link_params(args), client))
        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return 130

    except (RuntimeError, ValueError) as e:
        logger.error(f"Fatal error: {e}")
        return 1

    finally:
        if client:
            client.close()


def main():
    sys.exit(run_checkin())


# =============================================================================
# SCRIPT ENTRY POINT
# =============================================================================

if __name__ == '__main__':
    main()
