#!/usr/bin/env python3
"""
Demo: Orbits and Collisions Around the Attractor

Seeds a cloud of random particles and steps the simulation headless,
exactly as the broadcast driver would, then plots the result:

1. Random particles around the attractor at the origin
2. Each step: central force, then pairwise elastic collisions
3. Track kinetic energy, momentum and mean radius
4. Compare the canonical inverse-square law with the capped linear law

Output: output/demo_orbits/*.png
"""

from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

from orbsim.analysis import compute_diagnostics, snapshot_array
from orbsim.core import SimulationService, SeedConfig, create_force_law
from orbsim.viz import plot_snapshot, plot_trajectories, save_figure


def run(force_law_name: str, n_particles: int, n_steps: int, seed: int = 42):
    service = SimulationService(
        force_law=create_force_law(force_law_name),
        seed_config=SeedConfig(position_range=(-30.0, 30.0)),
        rng=np.random.default_rng(seed),
    )
    service.start(n_particles)

    history = [snapshot_array(service.snapshot())]
    stats = [compute_diagnostics(service.snapshot())]
    for _ in range(n_steps):
        snapshot = service.step()
        history.append(snapshot_array(snapshot))
        stats.append(compute_diagnostics(snapshot))

    return service, np.stack(history), stats


def main():
    print("=" * 60)
    print("  ORBITS AROUND A CENTRAL ATTRACTOR")
    print("=" * 60)

    out_dir = Path("output/demo_orbits")
    out_dir.mkdir(parents=True, exist_ok=True)

    n_particles = 40
    n_steps = 3000

    results = {}
    for name in ("inverse_square", "capped_linear"):
        print(f"\n{len(results) + 1}. Running {name} ({n_particles} particles, {n_steps} steps)...")
        service, history, stats = run(name, n_particles, n_steps)
        results[name] = (history, stats)

        print(f"   Kinetic energy: {stats[0].kinetic_energy:.2f} -> {stats[-1].kinetic_energy:.2f}")
        print(f"   Mean radius:    {stats[0].mean_radius:.2f} -> {stats[-1].mean_radius:.2f}")
        print(f"   Max speed:      {stats[-1].max_speed:.2f}")

        fig, _ = plot_snapshot(service.snapshot(), title=f"Final state ({name})", extent=60.0)
        save_figure(fig, out_dir / f"snapshot_{name}.png")
        plt.close(fig)

        fig = plot_trajectories(history[:, :8], title=f"Trajectories ({name}, first 8 particles)")
        save_figure(fig, out_dir / f"trajectories_{name}.png")
        plt.close(fig)

    print(f"\n{len(results) + 1}. Comparing force laws...")
    fig, axes = plt.subplots(1, 2, figsize=(12, 5))
    for name, (_, stats) in results.items():
        steps = np.arange(len(stats))
        axes[0].plot(steps, [s.kinetic_energy for s in stats], label=name, linewidth=2)
        axes[1].plot(steps, [s.mean_radius for s in stats], label=name, linewidth=2)

    axes[0].set_xlabel("Step")
    axes[0].set_ylabel("Kinetic energy")
    axes[0].set_title("Kinetic Energy vs Step")
    axes[1].set_xlabel("Step")
    axes[1].set_ylabel("Mean distance to attractor")
    axes[1].set_title("Mean Radius vs Step")
    for ax in axes:
        ax.legend()
        ax.grid(True, alpha=0.3)
    fig.tight_layout()
    save_figure(fig, out_dir / "force_law_comparison.png")
    plt.close(fig)

    print(f"\n   Figures saved to {out_dir}/")


if __name__ == "__main__":
    main()
