import numpy as np
import pandas as pd

from geo.bounds import BOROUGH_BOUNDS, BOROUGH_CENTER


def generate_viewport_trace(num_events=300, seed=7, output_file="viewport_trace.csv"):
    """
    Generates a pan/zoom trace of a user exploring the borough map.
    Map libraries fire a moveend for every small drag, so events arrive in bursts
    (50-200ms apart) separated by pauses where the user reads the map.
    """
    rng = np.random.default_rng(seed)

    center_lat, center_lng = BOROUGH_CENTER
    # roughly zoom 15 on a laptop screen
    half_lat, half_lng = 0.006, 0.010

    data = []
    t = 0.0
    for event_index in range(num_events):
        # 1. Timing: mostly quick drags, sometimes a pause
        if rng.random() < 0.15:
            t += rng.uniform(1.0, 6.0)
            gesture = "pause"
        else:
            t += rng.uniform(0.05, 0.2)
            gesture = "drag"

        # 2. Zoom: occasionally in or out by one level
        if rng.random() < 0.05:
            factor = 2.0 if rng.random() < 0.5 else 0.5
            half_lat = float(np.clip(half_lat * factor, 0.0015, 0.05))
            half_lng = float(np.clip(half_lng * factor, 0.0025, 0.08))
            gesture = "zoom"

        # 3. Pan: small random step, kept inside the borough
        center_lat = float(np.clip(center_lat + rng.normal(0, half_lat * 0.3),
                                   BOROUGH_BOUNDS.south_lat, BOROUGH_BOUNDS.north_lat))
        center_lng = float(np.clip(center_lng + rng.normal(0, half_lng * 0.3),
                                   BOROUGH_BOUNDS.west_lng, BOROUGH_BOUNDS.east_lng))

        data.append({
            "event_id": event_index + 1,
            "t_s": round(t, 3),
            "gesture": gesture,
            "sw_lat": round(center_lat - half_lat, 6),
            "sw_lng": round(center_lng - half_lng, 6),
            "ne_lat": round(center_lat + half_lat, 6),
            "ne_lng": round(center_lng + half_lng, 6),
        })

    # 4. Save to CSV
    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    print(f"Generated {num_events} viewport events over {t:.1f}s and saved to '{output_file}'")

    print("\nGesture mix:")
    for gesture, count in df["gesture"].value_counts().items():
        print(f"  {gesture}: {count}")


if __name__ == "__main__":
    generate_viewport_trace(num_events=300)
