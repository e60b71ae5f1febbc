"""
Example data generator for the PCA Plotter.

Creates a synthetic CSV with correlated numeric features so a PCA has
something to find: three latent factors mixed into six measured
columns plus noise, for 60 samples in three loose clusters.  Uses a
fixed seed so the file is identical on every run.
"""

import csv
import os

import numpy as np

EXAMPLE_FILENAME = "pca_example.csv"
EXAMPLE_COLUMNS = [
    "sample", "length", "width", "height", "mass", "density", "hardness",
]


def generate_example_csv(output_dir: str, n_samples: int = 60) -> str:
    """Write the example CSV into *output_dir* and return its path."""
    os.makedirs(output_dir, exist_ok=True)
    rng = np.random.default_rng(42)

    # Cluster centres in latent space
    centres = np.array([
        [-2.0, 0.5, 0.0],
        [1.5, -1.0, 0.8],
        [0.5, 2.0, -1.2],
    ])
    labels = np.arange(n_samples) % len(centres)
    latent = centres[labels] + rng.normal(scale=0.6, size=(n_samples, 3))

    # Six features from three factors
    mixing = np.array([
        [1.0, 0.2, 0.0],
        [0.8, 0.5, 0.1],
        [0.3, 1.0, 0.2],
        [0.9, 0.9, 0.4],
        [0.1, 0.3, 1.0],
        [0.0, 0.4, 0.9],
    ])
    features = latent @ mixing.T + rng.normal(scale=0.15, size=(n_samples, 6))
    features = features * 10.0 + 50.0

    path = os.path.join(output_dir, EXAMPLE_FILENAME)
    with open(path, 'w', newline='', encoding='utf-8') as fh:
        writer = csv.writer(fh)
        writer.writerow(EXAMPLE_COLUMNS)
        for i, row in enumerate(features):
            writer.writerow([f"S{i + 1:03d}"] + [f"{v:.3f}" for v in row])
    return path
