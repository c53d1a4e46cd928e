from typing import TYPE_CHECKING, List, Sequence, Tuple

from .models import Order

if TYPE_CHECKING:
    from .viewer import OrderBookViewer

BUY_HEADERS = ("Amount", "Total", "Price")
SELL_HEADERS = ("Price", "Total", "Amount")


def buy_rows(orders: Sequence[Order]) -> List[Tuple[str, str, str]]:
    return [(o.sell_amount, o.buy_amount, o.exchange) for o in orders]


def sell_rows(orders: Sequence[Order]) -> List[Tuple[str, str, str]]:
    return [(o.exchange, o.sell_amount, o.buy_amount) for o in orders]


def format_table(title: str, headers: Tuple[str, str, str], rows: List[Tuple[str, str, str]]) -> List[str]:
    sep = '  ' + '-' * 58

    def format_row(cells: Tuple[str, str, str]) -> str:
        return '  ' + '  '.join(f'{c:>18}' for c in cells)

    lines = [f'  {title}', sep, format_row(headers), sep]
    lines.extend(format_row(r) for r in rows)
    if not rows:
        lines.append('  (none)')
    lines.append(sep)
    return lines


def render_order_book(viewer: "OrderBookViewer") -> str:
    """Renders the viewer's message, current page of orders and paging controls as text."""
    state = viewer.state
    lines = ['', '  DEX-Book', '']
    if state.message:
        lines.extend(['  Message', ''])
        lines.extend(f'  {line}' for line in state.message.splitlines())
        lines.append('')
    if state.error:
        lines.extend([f'  Error: {state.error}', ''])
    if state.response is not None:
        lines.extend(format_table('Buy Orders', BUY_HEADERS, buy_rows(state.buy_orders)))
        lines.append('')
        lines.extend(format_table('Sell Orders', SELL_HEADERS, sell_rows(state.sell_orders)))
        back = '-' if viewer.back_disabled else 'b'
        nxt = '-' if viewer.next_disabled else 'n'
        lines.append(f'  Page {state.page}/{viewer.total_pages}   [{back}] Back  [r] Refresh  [{nxt}] Next  [t] Trade!')
    lines.append('')
    return '\n'.join(lines)
