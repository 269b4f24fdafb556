"""ansible-viz: dependency graphs for Ansible playbooks, roles and variables."""

__version__ = "0.3.0"
