"""Quick start guide for CHI32.

Demonstrates:
1. Random access with derive_value_at
2. Independent streams through the selector
3. Batched derivation on torch tensors
4. Strategy walks and the feedback chain
"""

import torch

from chi32 import Strategy, StrategyState, derive_value_at, derive_values_tensor, generate_values


def example_1_random_access():
    """Example 1: Any (selector, index) pair is one pure function call."""
    print("=" * 60)
    print("Example 1: Random Access")
    print("=" * 60)

    selector = 42
    for index in (0, 1, 1_000_000, -1):
        value = derive_value_at(selector, index)
        print(f"derive_value_at({selector}, {index:>9}) = {value:>11}  (0x{value & 0xFFFFFFFF:08X})")

    # Jumping ahead costs nothing: no state to advance
    assert derive_value_at(selector, 1_000_000) == derive_value_at(selector, 1_000_000)
    print()


def example_2_streams():
    """Example 2: Each selector is its own stream."""
    print("=" * 60)
    print("Example 2: Independent Streams")
    print("=" * 60)

    for selector in (0, 1, 2):
        values = [derive_value_at(selector, i) & 0xFFFFFFFF for i in range(4)]
        print(f"selector {selector}: " + " ".join(f"{v:08X}" for v in values))
    print()


def example_3_tensor():
    """Example 3: One call derives a whole grid of values."""
    print("=" * 60)
    print("Example 3: Batched Derivation")
    print("=" * 60)

    device = "cuda" if torch.cuda.is_available() else "cpu"
    selectors = torch.arange(4, dtype=torch.long, device=device).unsqueeze(1)
    indices = torch.arange(8, dtype=torch.long, device=device).unsqueeze(0)
    grid = derive_values_tensor(selectors, indices)
    print(f"Derived {grid.numel()} values on {device}, shape {tuple(grid.shape)}")
    assert grid[2, 5].item() == derive_value_at(2, 5) & 0xFFFFFFFF
    print()


def example_4_strategies():
    """Example 4: Walking the plane with a strategy."""
    print("=" * 60)
    print("Example 4: Strategies")
    print("=" * 60)

    for strategy in Strategy:
        values = generate_values(strategy, seed=42, phase=0, length=4)
        print(f"{strategy.label:<10} " + " ".join(f"{int(v):08X}" for v in values))

    state = StrategyState.start(Strategy.FEEDBACK, 0, 0)
    for _ in range(3):
        state.next_u32()
    print(f"feedback state after 3 steps: selector={state.selector}, index={state.index}")
    print()


if __name__ == "__main__":
    example_1_random_access()
    example_2_streams()
    example_3_tensor()
    example_4_strategies()
