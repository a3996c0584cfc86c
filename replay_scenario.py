"""Replay a karaoke-night scenario against a running backend via HTTP APIs.

The backend must run with ``clock.mode: manual`` so the script can move
business time minute by minute through ``/debug/clock/advance``.

Usage examples (PowerShell):

- Default (uses built-in presets):
    `python replay_scenario.py`

- Provide a JSON/YAML config with your own timeline:
    `python replay_scenario.py --config .\\my_night.yaml`

- Preview without sending requests:
    `python replay_scenario.py --dry-run`

The config file may define `baseUrl` and `timeline`; timeline keys are
minutes since the replay started, values are lists of actions.
"""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import requests
import yaml
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

BASE_URL = "http://localhost:8000"
SESSION = requests.Session()
DRY_RUN = False
CONSOLE = Console()
SNAPSHOT_ROWS: List[Dict[str, Any]] = []

# ---------------------------------------------------------------------------
# Timeline: minute -> actions. Each action = {"roomId", "type", "payload"}; type is one of
#   start, pause, resume, call_staff, add_order, checkout, end, status
TIMELINE: Dict[int, List[Dict[str, Any]]] = {
    0: [
        {"roomId": "R101", "type": "start", "payload": {"guestCount": 4}},
        {"roomId": "R201", "type": "start", "payload": {"guestCount": 8, "memberCard": "M123"}},
    ],
    5: [
        {"roomId": "R101", "type": "add_order", "payload": {"menuItemId": "M001", "quantity": 2}},
        {"roomId": "R201", "type": "add_order", "payload": {"menuItemId": "M003", "quantity": 6}},
    ],
    30: [
        {"roomId": "R201", "type": "pause"},
    ],
    45: [
        {"roomId": "R201", "type": "resume"},
        {"roomId": "R101", "type": "call_staff"},
    ],
    130: [
        {"roomId": "R101", "type": "checkout", "payload": {"paymentMethod": "Cash", "amountTendered": 30000}},
    ],
    160: [
        {"roomId": "R201", "type": "end"},
        {"roomId": "R101", "type": "status", "payload": {"status": "available"}},
    ],
}

ACTION_ROUTES: Dict[str, Tuple[str, str]] = {
    "start": ("POST", "/rooms/{roomId}/session/start"),
    "pause": ("POST", "/rooms/{roomId}/session/pause"),
    "resume": ("POST", "/rooms/{roomId}/session/resume"),
    "call_staff": ("POST", "/rooms/{roomId}/session/call-staff"),
    "add_order": ("POST", "/rooms/{roomId}/session/orders"),
    "checkout": ("POST", "/rooms/{roomId}/checkout"),
    "end": ("POST", "/rooms/{roomId}/session/end"),
    "status": ("PUT", "/rooms/{roomId}/status"),
}


def coerce_timeline(data: Dict[Any, Any]) -> Dict[int, List[Dict[str, Any]]]:
    result: Dict[int, List[Dict[str, Any]]] = {}
    for k, v in data.items():
        try:
            minute = int(k)
        except (TypeError, ValueError):
            raise ValueError(f"Timeline minute keys must be integers: got {k}")
        if not isinstance(v, list):
            raise ValueError(f"Timeline minute {minute} must be a list of actions")
        result[minute] = v
    return result


def load_config(path: Optional[str]) -> None:
    """Load external config to override baseUrl and timeline (JSON or YAML)."""
    global BASE_URL, TIMELINE
    if not path:
        return
    file = Path(path)
    if not file.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    if file.suffix.lower() in (".yml", ".yaml"):
        content = yaml.safe_load(file.read_text(encoding="utf-8")) or {}
    else:
        content = json.loads(file.read_text(encoding="utf-8")) or {}
    if isinstance(content.get("baseUrl"), str):
        BASE_URL = content["baseUrl"].rstrip("/")
    if isinstance(content.get("timeline"), dict):
        TIMELINE = coerce_timeline(content["timeline"])


def build_request(action: Dict[str, Any]) -> Tuple[str, str, Dict[str, Any]]:
    """Map a timeline action onto ``(method, url, json_body)``."""
    kind = action.get("type")
    if kind not in ACTION_ROUTES:
        raise ValueError(f"Unknown action type: {kind}")
    method, template = ACTION_ROUTES[kind]
    return method, BASE_URL + template.format(roomId=action["roomId"]), dict(action.get("payload") or {})


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay a karaoke-night timeline")
    parser.add_argument("--config", type=str, default=None, help="Path to JSON/YAML config with a timeline")
    parser.add_argument("--dry-run", action="store_true", help="Print requests without sending")
    parser.add_argument("--base-url", type=str, default=None, help="Override backend base URL")
    parser.add_argument("--excel", type=str, default="night_report.xlsx", help="Snapshot workbook path")
    return parser.parse_args()


def main() -> None:
    global BASE_URL, DRY_RUN
    args = parse_args()
    load_config(args.config)
    DRY_RUN = bool(args.dry_run)
    if args.base_url:
        BASE_URL = args.base_url.rstrip("/")

    simulate_timeline()
    if SNAPSHOT_ROWS and not DRY_RUN:
        export_excel_snapshots(SNAPSHOT_ROWS, args.excel)


# --- HTTP helpers ---------------------------------------------------------

def advance_clock(minutes: float) -> None:
    if minutes <= 0:
        return
    if DRY_RUN:
        CONSOLE.print(f"[magenta][DRY] POST {BASE_URL}/debug/clock/advance minutes={minutes}[/]")
        return
    resp = SESSION.post(f"{BASE_URL}/debug/clock/advance", json={"minutes": minutes}, timeout=5)
    resp.raise_for_status()


def send_action(action: Dict[str, Any]) -> None:
    method, url, body = build_request(action)
    if DRY_RUN:
        CONSOLE.print(Panel.fit(f"[DRY] {method} {url}\n{json.dumps(body, ensure_ascii=False)}", title="Dry Run", border_style="magenta"))
        return
    try:
        resp = SESSION.request(method, url, json=body or None, timeout=5)
        resp.raise_for_status()
        CONSOLE.print(f"[green]✔ {action['type']} {action['roomId']}[/]")
    except requests.RequestException as exc:
        CONSOLE.print(f"[red]⚠ {action['type']} {action['roomId']} failed: {exc}[/]")


def simulate_timeline() -> None:
    current = 0
    for minute in sorted(TIMELINE):
        advance_clock(minute - current)
        current = minute
        CONSOLE.rule(f"Minute {minute}")
        for action in TIMELINE[minute]:
            send_action(action)
        snapshot_rooms(minute)


def snapshot_rooms(minute: int) -> None:
    if DRY_RUN:
        return
    resp = SESSION.get(f"{BASE_URL}/rooms", timeout=5)
    resp.raise_for_status()
    table = Table(title=f"Rooms @ minute {minute}", box=box.SIMPLE)
    for col in ("room", "status", "billable h", "orders", "total"):
        table.add_column(col)
    for room in resp.json().get("rooms", []):
        bill = room.get("bill") or {}
        row = {
            "minute": minute,
            "roomId": room["room_id"],
            "status": room["status"],
            "billableHours": bill.get("billable_hours"),
            "orderTotal": bill.get("order_total"),
            "totalAmount": bill.get("total_amount"),
        }
        SNAPSHOT_ROWS.append(row)
        table.add_row(
            row["roomId"],
            row["status"],
            "" if row["billableHours"] is None else str(row["billableHours"]),
            "" if row["orderTotal"] is None else f"{row['orderTotal']:,.0f}",
            "" if row["totalAmount"] is None else f"{row['totalAmount']:,.0f}",
        )
    CONSOLE.print(table)


def export_excel_snapshots(rows: List[Dict[str, Any]], filename: str = "night_report.xlsx") -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = "snapshots"
    headers = ["minute", "roomId", "status", "billableHours", "orderTotal", "totalAmount"]
    ws.append(headers)
    header_fill = PatternFill(start_color="4F81BD", end_color="4F81BD", fill_type="solid")
    for cell in ws[1]:
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")
    for row in rows:
        ws.append([row.get(h) for h in headers])
    wb.save(filename)
    CONSOLE.print(f"[green]✔ Snapshots exported to {filename}[/]")


if __name__ == "__main__":
    main()
