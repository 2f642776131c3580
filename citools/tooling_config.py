"""
Configuration loader for citools.

Handles loading the YAML config that tunes the fixture and docs-publish chores.
Every field has a default, so a missing section (or no config file at all)
reproduces the stock behaviour.
"""
import os
import shlex
import yaml
from pathlib import Path
from typing import Optional, List, Dict, Any, Union
from dataclasses import dataclass, field, fields


CONFIG_ENV_VAR = 'CITOOLS_CONFIG'


def _as_command(value: Union[str, List[str], None], key: str) -> Optional[List[str]]:
    """Accept a command either as a list of args or a shell-style string."""
    if value is None:
        return None
    if isinstance(value, str):
        return shlex.split(value)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ValueError(f"{key} must be a string or a list of strings")


def _check_keys(section: str, data: Dict[str, Any], known: List[str]):
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ValueError(f"Unknown fields in {section}: {', '.join(unknown)}")


def _check_scalars(section: str, data: Dict[str, Any], cls):
    """Plain str and bool fields must arrive with exactly that YAML type."""
    for f in fields(cls):
        if f.name not in data or f.type not in (str, bool):
            continue
        if not isinstance(data[f.name], f.type):
            expected = 'true or false' if f.type is bool else 'a string'
            raise ValueError(
                f"{section}.{f.name} must be {expected}, got {type(data[f.name]).__name__} {data[f.name]!r}"
            )


@dataclass
class FixtureConfig:
    """Settings for the git test fixture."""
    user_email: str = 'git-test@example.com'
    user_name: str = 'Test'
    readme_name: str = 'README.md'
    readme_content: str = 'README\n'
    commit_message: str = 'initial commit'
    remote_name: str = 'origin'
    remote_url: str = 'https://github.com/NicolasDP/git'
    fetch: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FixtureConfig':
        _check_keys('fixture', data, [f.name for f in fields(cls)])
        _check_scalars('fixture', data, cls)
        return cls(**data)


@dataclass
class PublishConfig:
    """Settings for building and publishing documentation pages."""
    publish_branch: str = 'master'
    doc_command: List[str] = field(default_factory=lambda: ['cargo', 'doc'])
    doc_dir: str = 'target/doc'
    redirect_target: str = 'git/index.html'
    install_command: Optional[List[str]] = field(default_factory=lambda: ['pip', 'install', 'ghp-import'])
    import_command: List[str] = field(default_factory=lambda: ['ghp-import', '-n'])
    pages_branch: str = 'gh-pages'

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PublishConfig':
        _check_keys('publish', data, [f.name for f in fields(cls)])
        _check_scalars('publish', data, cls)
        data = dict(data)

        for key in ('doc_command', 'import_command'):
            if key in data:
                command = _as_command(data[key], f"publish.{key}")
                if not command:
                    raise ValueError(f"publish.{key} must not be empty")
                data[key] = command

        # install_command: null disables the install step
        if 'install_command' in data:
            data['install_command'] = _as_command(data['install_command'], 'publish.install_command') or None

        return cls(**data)


@dataclass
class ToolingConfig:
    """Top-level citools configuration."""
    fixture: FixtureConfig = field(default_factory=FixtureConfig)
    publish: PublishConfig = field(default_factory=PublishConfig)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> 'ToolingConfig':
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML config file

        Returns:
            ToolingConfig instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            ValueError: If the file has unknown or invalid fields
        """
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config not found: {yaml_path}")

        with open(yaml_path, 'r') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping: {yaml_path}")

        _check_keys(str(yaml_path), data, ['fixture', 'publish'])

        sections = {}
        for name in ('fixture', 'publish'):
            section = data.get(name) or {}
            if not isinstance(section, dict):
                raise ValueError(f"Section '{name}' must be a mapping in {yaml_path}")
            sections[name] = section

        return cls(
            fixture=FixtureConfig.from_dict(sections['fixture']),
            publish=PublishConfig.from_dict(sections['publish'])
        )

    @classmethod
    def load(cls, yaml_path: Optional[Path] = None) -> 'ToolingConfig':
        """Load from an explicit path, then $CITOOLS_CONFIG, else defaults."""
        if yaml_path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            if not env_path:
                return cls()
            yaml_path = Path(env_path)

        return cls.from_yaml(Path(yaml_path).expanduser())
