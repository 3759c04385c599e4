from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from apfrq.routes import VIEW_TOPIC, VIEW_YEAR
from apfrq.site import Site
from apfrq.urlstate import PARAM_CAT, PARAM_Q, PARAM_TYPE, PARAM_UNIT, PARAM_YEAR
from apfrq.views import ERROR, INFO, Page


console = Console()

HELP = (
    "[1..n] open link   g <path> go to path   b back   f forward\n"
    "s <text> search   c <category> category   t <type> question type   u <unit> unit   y <year> year\n"
    "  (blank value clears a filter, e.g. 'u')\n"
    "v year|topic switch view   r reset filters   ? help   0 exit"
)

# command letter -> FilterState field
_FILTER_COMMANDS = {
    "s": "free_text",
    "c": "category",
    "t": "question_type",
    "u": "unit",
    "y": "year",
}

_CONTROL_FOR_FIELD = {
    "free_text": PARAM_Q,
    "category": PARAM_CAT,
    "question_type": PARAM_TYPE,
    "unit": PARAM_UNIT,
    "year": PARAM_YEAR,
}

_NOTICE_STYLE = {ERROR: "bold red", INFO: "yellow"}


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    return console.input(msg)


def print_page(page: Optional[Page], location: str = "") -> None:
    """
    Print a page description to the terminal.
    """
    if page is None:
        _println("(nothing rendered)")
        return

    # numbering follows Page.links(): breadcrumbs, tabs, then section links
    number = 0
    _println(f"\n[dim]{escape(location)}[/]")
    if page.breadcrumbs:
        crumbs = []
        for link in page.breadcrumbs:
            number += 1
            crumbs.append(f"{escape(link.text)} [dim]\\[{number}][/]")
        _println(" / ".join(crumbs))
    _println(f"[bold cyan]{escape(page.heading)}[/]")

    if page.tabs:
        tabs = []
        for t in page.tabs:
            number += 1
            label = f"[reverse]{escape(t.text)}[/]" if t.active else escape(t.text)
            tabs.append(f"{label} [dim]\\[{number}][/]")
        _println("  ".join(tabs))

    for c in page.controls:
        value = escape(c.value or "-")
        if c.kind == "search":
            _println(f"[magenta]{escape(c.label)}[/]: {value}")
        else:
            opts = escape(", ".join(c.options[:12])) + (" ..." if len(c.options) > 12 else "")
            _println(f"[magenta]{escape(c.label)}[/]: {value}  [dim]({opts})[/]")

    for n in page.notices:
        style = _NOTICE_STYLE.get(n.kind, "")
        _println(f"[{style}]{escape(n.message)}[/]" if style else escape(n.message))
        for hint in n.hints:
            _println(f"  - {escape(hint)}")
        if n.detail:
            _println(f"  [dim]{escape(n.detail)}[/]")

    if page.count:
        _println(page.count)

    for section in page.sections:
        table = Table(
            title=escape(section.heading) or None,
            caption=escape(section.caption) or None,
            box=box.SIMPLE,
        )
        table.add_column("#", justify="right")
        table.add_column("Link")
        table.add_column("Units")
        for link in section.links:
            number += 1
            text = escape(link.text) if link.internal else f"[green]{escape(link.text)}[/]"
            table.add_row(str(number), text, escape(", ".join(link.badges)))
        if not section.links and section.empty_text:
            table.add_row("", f"[dim]{escape(section.empty_text)}[/]", "")
        console.print(table)


def asset_url(base_url: str, href: str) -> str:
    # index urls are usually site-absolute paths but may point elsewhere
    return urljoin(base_url.rstrip("/") + "/", href)


def _open_link(site: Site, base_url: str, pick: str) -> None:
    links = site.page.links() if site.page else []
    if not (pick.isascii() and pick.isdigit()):
        _println("Invalid choice. Type ? for help.")
        return
    i = int(pick)
    if not (1 <= i <= len(links)):
        _println("Out of range.")
        return

    link = links[i - 1]
    if link.internal:
        site.activate(link.href)
        return

    # assets (PDFs) are opened outside the browser
    _println(f"Open: {asset_url(base_url, link.href)}")


def run_interactive(site: Site, base_url: str = "") -> None:
    """
    Interactive browsing loop over the archive.
    """
    site.start()
    _println(HELP)

    while True:
        print_page(site.page, site.location)

        raw = _prompt("\n> ").strip()
        if not raw:
            continue

        cmd, _, arg = raw.partition(" ")
        arg = arg.strip()

        if cmd in ("0", "exit", "quit"):
            _println("Bye.")
            return

        if cmd.isascii() and cmd.isdigit():
            _open_link(site, base_url, cmd)
        elif cmd == "?":
            _println(HELP)
        elif cmd == "g":
            site.navigate(arg or "/")
        elif cmd == "b":
            if not site.back():
                _println("No previous page.")
        elif cmd == "f":
            if not site.forward():
                _println("No next page.")
        elif cmd == "v":
            if arg not in (VIEW_YEAR, VIEW_TOPIC):
                _println("Use: v year | v topic")
                continue
            site.switch_view(arg)
        elif cmd == "r":
            site.reset_filters()
        elif cmd in _FILTER_COMMANDS:
            field = _FILTER_COMMANDS[cmd]
            if site.page is None or site.page.control(_CONTROL_FOR_FIELD[field]) is None:
                _println("That filter is not available on this page.")
                continue
            site.update_filters(**{field: arg})
        else:
            _println("Invalid choice. Type ? for help.")
