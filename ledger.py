# ledger.py
import datetime


def format_currency(amount: float, currency: str = "$") -> str:
    return f"{currency}{amount:,.2f}"


class SaleRecord:
    """A committed sale. Built once by checkout and never changed afterwards."""
    def __init__(self, items, subtotal: float, saved: float, timestamp: str = None, summary: str = None):
        self._items = tuple(dict(it) for it in items)
        self._subtotal = subtotal
        self._saved = saved
        self._timestamp = timestamp if timestamp is not None else datetime.datetime.now().isoformat(timespec='seconds')
        self._summary = summary or self._build_summary()

    @property
    def items(self) -> list:
        return [dict(it) for it in self._items]

    @property
    def subtotal(self) -> float:
        return self._subtotal

    @property
    def saved(self) -> float:
        return self._saved

    @property
    def timestamp(self) -> str:
        return self._timestamp

    @property
    def summary(self) -> str:
        return self._summary

    def _build_summary(self) -> str:
        parts = ", ".join(
            f"{it['qty']}{'sl' if it['unit'] == 'slice' else 'u'} {it['name']}" for it in self._items
        )
        msg = f"Sale: {parts} | subtotal {format_currency(self._subtotal)}"
        if self._saved > 0:
            msg += f" (saved {format_currency(self._saved)})"
        return msg

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "items": self.items,
            "subtotal": self.subtotal,
            "saved": self.saved,
            "summary": self.summary,
        }

    @classmethod
    def from_dict(cls, data) -> "SaleRecord":
        # Older saves kept only the summary line
        if isinstance(data, str):
            return cls([], 0.0, 0.0, timestamp="", summary=data)
        return cls(data.get("items", []), float(data.get("subtotal", 0)), float(data.get("saved", 0)),
                   timestamp=data.get("timestamp", ""), summary=data.get("summary"))

    def __eq__(self, other):
        if not isinstance(other, SaleRecord):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self):
        return self.summary

    def __repr__(self):
        return f"SaleRecord({self.summary!r})"


class Ledger:
    """Append-only sale history plus the running revenue total."""
    def __init__(self, entries=None, revenue: float = 0.0):
        self._entries = list(entries or [])
        self._revenue = float(revenue)

    @property
    def entries(self) -> list:
        """Newest sale first."""
        return list(self._entries)

    @property
    def revenue(self) -> float:
        return self._revenue

    def __len__(self):
        return len(self._entries)

    def record(self, sale: SaleRecord):
        self._entries.insert(0, sale)
        self._revenue += sale.subtotal

    def to_list(self) -> list:
        return [e.to_dict() for e in self._entries]

    @classmethod
    def from_list(cls, data, revenue: float = 0.0) -> "Ledger":
        return cls([SaleRecord.from_dict(d) for d in data], revenue)
