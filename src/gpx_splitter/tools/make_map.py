from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Optional

from gpx_splitter.core.engine import plan_chunks
from gpx_splitter.errors import SplitError
from gpx_splitter.gpx.document import get_segment, load_gpx, source_basename


CHUNK_COLORS = [
    "#2ecc71",
    "#3498db",
    "#e67e22",
    "#9b59b6",
    "#e74c3c",
    "#f1c40f",
]


def build_map_html(source, km_per_file: float, method: Optional[str] = None) -> str:
    gpx = load_gpx(source)
    points = get_segment(gpx).points

    chunks = []
    for plan in plan_chunks(points, km_per_file * 1000.0, source_basename(source), method=method):
        chunks.append(
            {
                "index": plan.index,
                "file": plan.filename,
                "km": round(plan.distance_m / 1000.0, 2),
                "color": CHUNK_COLORS[(plan.index - 1) % len(CHUNK_COLORS)],
                "coords": [[p.latitude, p.longitude] for p in plan.points],
            }
        )
    if not chunks:
        raise ValueError(f"No points found in track 0 / segment 0 of {source}")

    return f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>gpx-splitter – {source_basename(source)}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <link rel="stylesheet" href="https://unpkg.com/leaflet@1.9.4/dist/leaflet.css" />
  <style>
    body {{ margin: 0; font-family: system-ui, -apple-system, Segoe UI, Roboto, sans-serif; }}
    #map {{ height: 100vh; width: 100vw; }}
  </style>
</head>
<body>
<div id="map"></div>
<script src="https://unpkg.com/leaflet@1.9.4/dist/leaflet.js"></script>
<script>
  const chunks = {json.dumps(chunks)};

  const map = L.map('map');

  L.tileLayer('https://{{s}}.tile.openstreetmap.org/{{z}}/{{x}}/{{y}}.png', {{
    maxZoom: 18,
    attribution: '&copy; OpenStreetMap contributors'
  }}).addTo(map);

  const all = [];
  chunks.forEach((c) => {{
    const popup = `<b>${{c.file}}</b><br/>${{c.coords.length}} points, ${{c.km}} km`;
    L.polyline(c.coords, {{ color: c.color, weight: 5, opacity: 0.9 }}).addTo(map).bindPopup(popup);
    // boundary point shared with the next file
    const last = c.coords[c.coords.length - 1];
    L.circleMarker(last, {{ radius: 5, color: c.color }}).addTo(map).bindPopup(popup);
    c.coords.forEach((p) => all.push(p));
  }});

  map.fitBounds(L.latLngBounds(all).pad(0.1));
</script>
</body>
</html>
"""


def write_map(source, km_per_file: float, out_path: Path, method: Optional[str] = None) -> Path:
    html = build_map_html(source, km_per_file, method=method)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(html, encoding="utf-8")
    return out_path


def main() -> None:
    ap = argparse.ArgumentParser(description="Preview how a GPX file would be split, as a Leaflet map")
    ap.add_argument("gpx")
    ap.add_argument("km_per_file", type=float)
    ap.add_argument("--out", type=Path, default=Path("split_map.html"))
    ap.add_argument("--method", choices=["haversine", "geodesic"], default=None)
    args = ap.parse_args()

    try:
        out_path = write_map(args.gpx, args.km_per_file, args.out, method=args.method)
    except (SplitError, ValueError) as exc:
        raise SystemExit(f"error: {exc}")
    print(f"Wrote: {out_path.resolve()}")


if __name__ == "__main__":
    main()
