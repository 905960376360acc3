# provisioner/templates.py
# -*- coding: utf-8 -*-
"""
Renders the static configuration artifacts: the SSH client config, the
starship prompt config and the MOTD banner script.
"""

from typing import Iterable, List

from provisioner.config_models import (
    MotdSettings,
    PromptSettings,
    ShellSettings,
    SshHost,
    SshSettings,
)

SECTION_RULE = "# " + "=" * 76


def _toml_bool(value: bool) -> str:
    return "true" if value else "false"


def _section_header(title: str) -> List[str]:
    return [SECTION_RULE, f"# {title}", SECTION_RULE, ""]


def _host_block(host: SshHost) -> List[str]:
    lines: List[str] = []
    if host.description:
        lines.append(f"# {host.alias} - {host.description}")
    if host.location:
        lines.append(f"# Location: {host.location}")
    if host.specs:
        lines.append(f"# Specs: {host.specs}")
    lines.extend(
        [
            f"Host {host.alias}",
            f"  HostName {host.hostname}",
            f"  User {host.user}",
            f"  IdentityFile {host.identity_file}",
            f"  Port {host.port}",
            f"  ForwardAgent {'yes' if host.forward_agent else 'no'}",
        ]
    )
    if host.private_ip:
        lines.append(
            f"  # Private IP: {host.private_ip} (use if connecting from within the same network)"
        )
    lines.append("")
    return lines


def _grouped(hosts: Iterable[SshHost]):
    groups: dict = {}
    for host in hosts:
        groups.setdefault(host.group, []).append(host)
    return groups.items()


def render_ssh_config(ssh_settings: SshSettings) -> str:
    """Render ~/.ssh/config: global options, hosts grouped by section, then short aliases."""
    lines: List[str] = ["# ~/.ssh/config", "", "# Global settings for all hosts", "Host *"]
    lines.extend(f"  {key} {value}" for key, value in ssh_settings.global_options.items())
    lines.append("")

    for group, hosts in _grouped(ssh_settings.hosts):
        lines.extend(_section_header(group))
        for host in hosts:
            lines.extend(_host_block(host))

    if ssh_settings.short_aliases:
        lines.extend(_section_header("Short Aliases (for convenience)"))
        for alias in ssh_settings.short_aliases:
            lines.extend(
                [
                    f"Host {alias.alias}",
                    f"  HostName {alias.hostname}",
                    f"  User {alias.user}",
                    f"  IdentityFile {alias.identity_file}",
                    "",
                ]
            )

    while lines and lines[-1] == "":
        lines.pop()
    return "\n".join(lines) + "\n"


def render_starship_config(shell_settings: ShellSettings) -> str:
    prompt: PromptSettings = shell_settings.prompt
    return shell_settings.starship_template.format(
        add_newline=_toml_bool(prompt.add_newline),
        ssh_only=_toml_bool(prompt.ssh_only),
        hostname_style=prompt.hostname_style,
        prompt_symbol=prompt.prompt_symbol,
        success_style=prompt.success_style,
        error_style=prompt.error_style,
        directory_style=prompt.directory_style,
        truncation_length=prompt.truncation_length,
        truncate_to_repo=_toml_bool(prompt.truncate_to_repo),
        git_branch_style=prompt.git_branch_style,
        git_branch_symbol=prompt.git_branch_symbol,
        git_status_style=prompt.git_status_style,
    )


def render_motd_script(motd_settings: MotdSettings) -> str:
    return motd_settings.script_template
