"""
CLI Module.

Command-line client built with Typer and Rich.

Architecture:
- CLI is a thin presentation layer
- Queries and name resolution live in diver.ucp / diver.store
- Every command is one request/response cycle, then the process exits

Usage:
    diver --help
    diver ucp login --url https://ucp.example.com
    diver ucp service list --name web --resolve --node
"""
