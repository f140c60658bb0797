#!/usr/bin/env python3
"""
Main entry point for the Sparks onboarding engine.
Allows running the package with: python -m sparks_onboarding
"""
import sys
import random
from .config import get_config, clamp_time_limit
from .utils import setup_logging
from . import OnboardingOrchestrator


def main():
    """Command-line interface for the onboarding orchestrator."""

    # Load configuration from environment
    try:
        config = get_config()
    except ValueError as e:
        print(f"❌ Configuration Error: {e}")
        sys.exit(1)

    seed = None
    for arg in sys.argv[1:]:
        if arg.startswith("--time-limit="):
            try:
                config.time_limit_seconds = clamp_time_limit(int(arg.split("=")[1]))
            except (ValueError, IndexError):
                print("❌ Invalid time limit. Use --time-limit=60 to --time-limit=600")
                sys.exit(1)
        elif arg.startswith("--seed="):
            try:
                seed = int(arg.split("=")[1])
            except (ValueError, IndexError):
                print("❌ Invalid seed. Use --seed=<integer>")
                sys.exit(1)
        else:
            print(f"❌ Unknown option: {arg}")
            print("   Usage: python -m sparks_onboarding [--time-limit=N] [--seed=N]")
            sys.exit(1)

    setup_logging(config.log_file, config.log_level)

    # Show configuration
    print(f"⏱️  Time limit: {config.time_limit_seconds}s")
    print(f"🧠 AI model: {config.ai_model}")
    if seed is not None:
        print(f"🎲 Seed: {seed}")

    try:
        orchestrator = OnboardingOrchestrator(config=config, rng=random.Random(seed))
    except ValueError as e:
        print(f"❌ Configuration Error: {e}")
        sys.exit(1)

    # Run the onboarding; results are displayed by run()
    orchestrator.run()


if __name__ == "__main__":
    main()
