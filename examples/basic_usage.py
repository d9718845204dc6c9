#!/usr/bin/env python3
"""Basic spikeslayer usage: detect spikes in an in-memory series.

This example builds a series of records, plugs X/Y accessors and a
transform, and prints the spikes found by the array runner.
"""

import numpy as np

from spikeslayer import slayer

# A noisy baseline with 3 injected spikes
rng = np.random.default_rng(123)
values = rng.normal(1.0, 0.1, size=200)
values[40] = 9.0
values[110] = 12.0
values[170] = 7.5

records = [
    {"id": f"sample-{i}", "t": round(i * 0.5, 1), "value": float(v)}
    for i, v in enumerate(values)
]


def with_id(point, record, i):
    point["id"] = record["id"]
    point["t"] = point.pop("x")
    return point


def report(error, spikes):
    if error is not None:
        print(f"Detection failed: {error}")
        return
    print(f"Detected {len(spikes)} spikes:")
    for spike in spikes:
        print(f"  {spike['id']}: t = {spike['t']:.1f} s, value = {spike['y']:.2f}")


(
    slayer({"algorithm": "distance", "minPeakDistance": 10, "minPeakHeight": 5})
    .x(lambda record, i: record["t"])
    .y(lambda record: record["value"])
    .transform(with_id)
    .from_array(records, report)
)
