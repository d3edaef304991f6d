import argparse
import logging
import shlex
import sys
from collections.abc import Callable

from bootstrap import Ledger, bootstrap_ledger
from config import DATA_DIR, LOG_LEVEL
from domain.errors import DomainError
from domain.notifications import LedgerWarning
from domain.records import TransactionType
from domain.reports import format_amount
from utils.exporters import export_report

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  register <login> <password>                 register a user
  login <login> <password>                    log in
  logout                                      log out
  create-category <name>                      create a category
  set-budget <category> <amount>              set a category budget
  add-income <amount> <category> [description]
  add-expense <amount> <category> [description]
  transfer <login> <amount> [description]     send funds to another user
  show-summary                                print the full summary
  show-category <category...>                 net totals for categories
  show-budgets                                budget table
  export <file>                               export summary (.txt/.csv/.xlsx/.pdf)
  save                                        save all data
  exit                                        save and quit
  help                                        show this help"""


def parse_amount(value: str) -> float | None:
    try:
        return float(value.replace(",", "."))
    except ValueError:
        return None


class Session:
    def __init__(self) -> None:
        self.login: str | None = None

    def require_login(self, out: Callable[[str], None]) -> bool:
        if self.login is None:
            out("Log in first (command: login).")
            return False
        return True


class LedgerShell:
    """Line-oriented command loop over a single Ledger."""

    def __init__(self, ledger: Ledger, out: Callable[[str], None] = print):
        self.ledger = ledger
        self.session = Session()
        self._out = out
        ledger.notifier.subscribe(self._print_warning)

    def _print_warning(self, warning: LedgerWarning) -> None:
        self._out(f"[WARNING] {warning.message}")

    def _save(self) -> None:
        report = self.ledger.save_all.execute()
        if not report.ok:
            self._out("Some data could not be saved, see the log for details.")

    def prompt(self) -> str:
        return "> " if self.session.login is None else f"{self.session.login}> "

    def handle(self, line: str) -> bool:
        """Run one command line. Returns False when the loop should stop."""
        line = line.strip()
        if not line:
            return True
        try:
            parts = shlex.split(line)
        except ValueError as exc:
            self._out(f"Error: {exc}")
            return True
        cmd, args = parts[0].lower(), parts[1:]
        handler = self._commands().get(cmd)
        if handler is None:
            self._out("Unknown command. Type 'help' for the list.")
            return True
        try:
            return handler(args) is not False
        except DomainError as exc:
            self._out(f"Error: {exc}")
        except Exception as exc:
            logger.exception("Unexpected error while running %s", cmd)
            self._out(f"Unexpected error: {exc}")
        return True

    def _commands(self) -> dict[str, Callable[[list[str]], bool | None]]:
        return {
            "help": lambda args: self._out(HELP_TEXT),
            "register": self._register,
            "login": self._login,
            "logout": self._logout,
            "create-category": self._create_category,
            "set-budget": self._set_budget,
            "add-income": lambda args: self._add(args, TransactionType.INCOME),
            "add-expense": lambda args: self._add(args, TransactionType.EXPENSE),
            "transfer": self._transfer,
            "show-summary": self._show_summary,
            "show-category": self._show_category,
            "show-budgets": self._show_budgets,
            "export": self._export,
            "save": self._save_command,
            "exit": self._exit,
        }

    def _register(self, args: list[str]) -> None:
        if len(args) < 2:
            self._out("Usage: register <login> <password>")
            return
        self.ledger.auth.register(args[0], args[1])
        self._save()
        self._out(f"User registered: {args[0]}")

    def _login(self, args: list[str]) -> None:
        if len(args) < 2:
            self._out("Usage: login <login> <password>")
            return
        wallet = self.ledger.open_session.execute(login=args[0], password=args[1])
        self.session.login = wallet.owner_login
        self._out(f"Logged in as: {wallet.owner_login}")

    def _logout(self, args: list[str]) -> None:
        self.session.login = None
        self._out("Logged out.")

    def _create_category(self, args: list[str]) -> None:
        if not self.session.require_login(self._out):
            return
        if not args:
            self._out("Usage: create-category <name>")
            return
        self.ledger.create_category.execute(login=self.session.login, name=args[0])
        self._out(f"Category created: {args[0]}")

    def _set_budget(self, args: list[str]) -> None:
        if not self.session.require_login(self._out):
            return
        if len(args) < 2:
            self._out("Usage: set-budget <category> <amount>")
            return
        amount = parse_amount(args[1])
        if amount is None:
            self._out("Invalid amount.")
            return
        category = self.ledger.set_budget.execute(
            login=self.session.login, category=args[0], amount=amount
        )
        self._out(f"Budget set: {category.name} = {format_amount(category.budget)}")

    def _add(self, args: list[str], type: TransactionType) -> None:
        if not self.session.require_login(self._out):
            return
        if len(args) < 2:
            self._out(f"Usage: add-{type.value.lower()} <amount> <category> [description]")
            return
        amount = parse_amount(args[0])
        if amount is None:
            self._out("Invalid amount.")
            return
        self.ledger.add_transaction.execute(
            login=self.session.login,
            type=type,
            amount=amount,
            category=args[1],
            description=" ".join(args[2:]),
        )
        self._save()
        self._out("Income added." if type is TransactionType.INCOME else "Expense added.")

    def _transfer(self, args: list[str]) -> None:
        if not self.session.require_login(self._out):
            return
        if len(args) < 2:
            self._out("Usage: transfer <login> <amount> [description]")
            return
        amount = parse_amount(args[1])
        if amount is None:
            self._out("Invalid amount.")
            return
        self.ledger.transfer.execute(
            from_login=self.session.login,
            to_login=args[0],
            amount=amount,
            description=" ".join(args[2:]),
        )
        self._save()
        self._out(f"Transferred to {args[0]}")

    def _show_summary(self, args: list[str]) -> None:
        if not self.session.require_login(self._out):
            return
        self._out(self.ledger.generate_summary.execute(self.session.login))

    def _show_category(self, args: list[str]) -> None:
        if not self.session.require_login(self._out):
            return
        if not args:
            self._out("Usage: show-category <category...>")
            return
        totals = self.ledger.sum_by_categories.execute(self.session.login, args)
        if not totals:
            self._out("No matching categories.")
            return
        self._out("Category totals:")
        for name, total in totals.items():
            self._out(f"  {name}: {format_amount(total)}")

    def _show_budgets(self, args: list[str]) -> None:
        if not self.session.require_login(self._out):
            return
        self._out(self.ledger.generate_report.execute(self.session.login).budget_table())

    def _export(self, args: list[str]) -> None:
        if not self.session.require_login(self._out):
            return
        if not args:
            self._out("Usage: export <file>")
            return
        report = self.ledger.generate_report.execute(self.session.login)
        export_report(report, args[0])
        self._out(f"Report saved to: {args[0]}")

    def _save_command(self, args: list[str]) -> None:
        self._save()
        self._out("All data saved.")

    def _exit(self, args: list[str]) -> bool:
        self._out("Saving data and exiting...")
        self._save()
        return False

    def run(self, stream=None) -> None:
        stream = stream or sys.stdin
        self._out("Personal finance ledger. Type 'help' for the list of commands.")
        while True:
            if stream is sys.stdin:
                try:
                    line = input(self.prompt())
                except EOFError:
                    break
            else:
                line = stream.readline()
                if not line:
                    break
            if not self.handle(line):
                return
        self._save()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Personal finance ledger shell")
    parser.add_argument("--data-dir", default=DATA_DIR, help="Directory for wallet and user records")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Logging level (default: WARNING)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    shell = LedgerShell(bootstrap_ledger(args.data_dir))
    shell.run()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\nApplication closed by user.")
