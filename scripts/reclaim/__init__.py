"""Mannequin reclaim tooling.

Remaps mannequin identities left behind by an organization migration onto
real GitHub user accounts, one at a time or in bulk from a CSV manifest.
"""
