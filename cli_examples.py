#!/usr/bin/env python3
"""
Examples of using the gameoflife CLI for different scenarios.
"""

import subprocess


def run_cli_command(args):
    """Run a CLI command and capture its output."""
    cmd = ["gameoflife"] + args
    print(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=30)
        print(result.stdout)
        if result.stderr:
            print(f"Stderr: {result.stderr}")
        print("-" * 50)
        return result.returncode == 0
    except subprocess.TimeoutExpired:
        print("Command timed out")
        return False


def main():
    """Run various CLI examples."""
    print("Conway's Game of Life CLI Examples")
    print("=" * 50)

    examples = [
        (["--list-patterns"], "List all available patterns"),
        (["--pattern", "Block", "-r", "6", "-c", "6", "--until-stable", "-i", "0"],
         "Still life pattern (stops after one generation)"),
        (["--pattern", "Blinker", "-r", "5", "-c", "5", "-m", "4", "-i", "0"],
         "Oscillating blinker pattern"),
        (["--pattern", "Glider", "-r", "12", "-c", "12", "-m", "8", "-i", "0"],
         "Glider moving across a dead-border grid"),
        (["--count", "200", "--seed", "7", "--display", "1", "100", "200", "-m", "25", "-i", "0"],
         "Two hundred random games, three of them on screen"),
        (["--count", "20", "--population", "0.2", "--seed", "3", "-m", "50", "-i", "0",
          "--save", "examples.txt", "--save-on-exit"],
         "Sparse population saved to a text file"),
        (["--load", "examples.txt", "-m", "10", "-i", "0", "--verbose"],
         "Continue the saved games"),
    ]

    success_count = 0
    for args, description in examples:
        print(f"\nExample: {description}")
        print("-" * len(f"Example: {description}"))
        if run_cli_command(args):
            success_count += 1
        else:
            print("Failed")

    print(f"\nSummary: {success_count}/{len(examples)} examples completed successfully")


if __name__ == "__main__":
    main()
