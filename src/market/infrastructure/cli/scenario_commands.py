"""CLI commands that drive an in-memory marketplace from a scenario.

A scenario is a plain text file, one operation per line:

    add <caller> <price> <name...>     list a product
    buy <caller> <id> <amount>         buy a product, attaching <amount>
    show <id>                          show one product
    list                               show every product
    fail <identity>                    make transfers to <identity> fail
    restore <identity>                 let transfers to <identity> succeed again
    balances                           show value received per identity
    events                             show the event log

Blank lines and lines starting with ``#`` are ignored.  State lives only
for the duration of the command.
"""

from __future__ import annotations

import shlex

import click

from market.application.dto import ProductDTO
from market.domain.exceptions import DomainException
from market.domain.model.events import ProductCreated, ProductSold
from market.domain.model.value_objects import Identity, Value
from market.infrastructure.bootstrap import Marketplace, build_marketplace
from market.infrastructure.payment.ledger_gateway import LedgerPaymentGateway

DEMO_SCENARIO = """\
# U1 lists a phone, U2 overpays and gets change, U3 is too late.
add U1 1000 Phone A
buy U2 1 1200
show 1
buy U3 1 1000
balances
events
"""


class ScenarioError(click.ClickException):
    """A scenario line could not be parsed."""


class ScenarioRunner:

    def __init__(self, strict: bool = False) -> None:
        self.gateway = LedgerPaymentGateway()
        self.market: Marketplace = build_marketplace(self.gateway)
        self.strict = strict
        self.failures = 0

    def run(self, text: str) -> None:
        for lineno, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            try:
                words = shlex.split(line)
            except ValueError as exc:
                raise ScenarioError(f"line {lineno}: {exc}")
            try:
                self._execute(lineno, words)
            except DomainException as exc:
                self.failures += 1
                if self.strict:
                    raise click.ClickException(f"line {lineno}: {exc}")
                click.echo(f"line {lineno}: rejected ({type(exc).__name__}): {exc}")

    # --- Operations -----------------------------------------------------------

    def _execute(self, lineno: int, words: list[str]) -> None:
        op, args = words[0].lower(), words[1:]

        if op == "add":
            _require(lineno, op, args, 3, exact=False)
            product = self.market.add_product(Identity(args[0]), " ".join(args[2:]), args[1])
            click.echo(f"Product #{product.id} '{product.name}' listed at {product.price} by {product.owner}")
        elif op == "buy":
            _require(lineno, op, args, 3)
            amount = Value.of(args[2])
            receipt = self.market.buy_product(Identity(args[0]), _int(lineno, args[1]), amount)
            change = amount - receipt.price
            suffix = f" (refunded {change})" if change.amount else ""
            click.echo(f"Product #{receipt.id} sold to {receipt.new_owner} for {receipt.price}{suffix}")
        elif op == "show":
            _require(lineno, op, args, 1)
            _display_product(self.market.show_product(_int(lineno, args[0])))
        elif op == "list":
            _require(lineno, op, args, 0)
            self._list()
        elif op == "fail":
            _require(lineno, op, args, 1)
            self.gateway.fail_transfers_to(Identity(args[0]))
            click.echo(f"Transfers to {args[0]} will fail")
        elif op == "restore":
            _require(lineno, op, args, 1)
            self.gateway.restore_transfers_to(Identity(args[0]))
            click.echo(f"Transfers to {args[0]} restored")
        elif op == "balances":
            _require(lineno, op, args, 0)
            self._balances()
        elif op == "events":
            _require(lineno, op, args, 0)
            self._events()
        else:
            raise ScenarioError(f"line {lineno}: unknown operation '{words[0]}'")

    def _list(self) -> None:
        products = self.market.list_products()
        if not products:
            click.echo("No products listed.")
            return
        click.echo(f"{'ID':<6} {'Name':<20} {'Price':>10} {'Owner':<12} {'Sold':<5}")
        click.echo("-" * 57)
        for p in products:
            click.echo(f"{p.id:<6} {p.name:<20} {p.price:>10} {p.owner:<12} {'yes' if p.sold else 'no':<5}")

    def _balances(self) -> None:
        balances = self.gateway.balances()
        if not balances:
            click.echo("No value transferred.")
            return
        for identity, value in sorted(balances.items(), key=lambda kv: kv[0].ref):
            click.echo(f"{identity.ref:<12} {value.amount:>10}")

    def _events(self) -> None:
        for event in self.market.event_log.list_all():
            if isinstance(event, ProductCreated):
                click.echo(f"ProductCreated  #{event.id} '{event.name}' price={event.price} owner={event.owner}")
            elif isinstance(event, ProductSold):
                click.echo(f"ProductSold     #{event.id} '{event.name}' price={event.price} new_owner={event.new_owner}")


def _require(lineno: int, op: str, args: list[str], count: int, exact: bool = True) -> None:
    if (exact and len(args) != count) or len(args) < count:
        raise ScenarioError(f"line {lineno}: '{op}' expects {count} argument(s), got {len(args)}")


def _int(lineno: int, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ScenarioError(f"line {lineno}: invalid product id '{raw}'")


def _display_product(dto: ProductDTO) -> None:
    click.echo(f"Product #{dto.id}  '{dto.name}'")
    click.echo(f"  Price: {dto.price}")
    click.echo(f"  Owner: {dto.owner}")
    click.echo(f"  Sold:  {'yes' if dto.sold else 'no'}")


@click.command("run")
@click.argument("script", type=click.File("r"))
@click.option("--strict", is_flag=True, default=False, help="Stop at the first rejected operation.")
def scenario_run(script, strict: bool) -> None:
    """Run a scenario file against a fresh in-memory marketplace."""
    runner = ScenarioRunner(strict=strict)
    runner.run(script.read())


@click.command("demo")
def scenario_demo() -> None:
    """Run the built-in demonstration scenario."""
    ScenarioRunner().run(DEMO_SCENARIO)
