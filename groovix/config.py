"""YAML configuration.

A config file is optional. Every key is optional too::

	notation:
	  default_octave: 5
	  default_length: 1
	  max_expanded_tokens: 100000
	clip:
	  bpm: 120
	  beats_per_bar: 4
	melody:
	  genre: jazz
	  density: 0.7
	  preferred_scale: {root: A, mode: dorian}
"""

import dataclasses
import logging
import os
import typing

import yaml

import groovix.melody
import groovix.notation
import groovix.pitches


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "groovix.yaml"


def load_config (config_path: str = DEFAULT_CONFIG_PATH) -> dict:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		data = yaml.safe_load(f)

	if data is None:
		return {}

	if not isinstance(data, dict):
		raise ValueError(f"Config file {config_path} must contain a mapping at the top level")

	return data


@dataclasses.dataclass
class Settings:

	"""
	Resolved settings shared by the command line and the library entry points.
	"""

	default_octave: int = groovix.pitches.DEFAULT_OCTAVE
	default_length: int = groovix.notation.DEFAULT_LENGTH
	max_expanded_tokens: int = groovix.notation.DEFAULT_MAX_TOKENS
	bpm: float = 120.0
	beats_per_bar: int = 4
	melody: typing.Dict[str, typing.Any] = dataclasses.field(default_factory=dict)


def settings_from_config (config: typing.Mapping[str, typing.Any]) -> Settings:

	"""Build `Settings` from a loaded config mapping, falling back to defaults."""

	notation = config.get('notation', {}) or {}
	clip = config.get('clip', {}) or {}

	settings = Settings(
		default_octave = int(notation.get('default_octave', groovix.pitches.DEFAULT_OCTAVE)),
		default_length = int(notation.get('default_length', groovix.notation.DEFAULT_LENGTH)),
		max_expanded_tokens = int(notation.get('max_expanded_tokens', groovix.notation.DEFAULT_MAX_TOKENS)),
		bpm = float(clip.get('bpm', 120.0)),
		beats_per_bar = int(clip.get('beats_per_bar', 4)),
		melody = dict(config.get('melody', {}) or {})
	)

	if settings.default_length < 1:
		raise ValueError("default_length must be at least 1")

	if settings.max_expanded_tokens < 1:
		raise ValueError("max_expanded_tokens must be at least 1")

	if settings.bpm <= 0:
		raise ValueError("bpm must be positive")

	return settings


def _preferred_scale (value: typing.Any) -> typing.Optional[groovix.melody.PreferredScale]:

	if value is None:
		return None

	if isinstance(value, str):
		return groovix.melody.PreferredScale(root=value)

	if isinstance(value, (list, tuple)):
		return groovix.melody.PreferredScale(notes=tuple(str(name) for name in value))

	if isinstance(value, dict):
		notes = value.get('notes')
		return groovix.melody.PreferredScale(
			root = str(value.get('root', 'C')),
			mode = str(value.get('mode', 'ionian')),
			notes = tuple(str(name) for name in notes) if notes else ()
		)

	raise ValueError(f"Cannot read preferred_scale from {value!r}")


def melody_params_from_config (
	overrides: typing.Mapping[str, typing.Any],
	beats_per_bar: typing.Optional[int] = None,
	seed: typing.Optional[int] = None
) -> groovix.melody.MelodyParams:

	"""Build `MelodyParams` from a ``melody:`` config section.

	Unknown keys are logged and ignored. ``beats_per_bar`` fills in the bar
	size when the section leaves it unset; ``seed`` always overrides.

	Example:
		```python
		params = melody_params_from_config({"genre": "edm", "density": 0.8}, seed=5)
		```
	"""

	known = {field.name for field in dataclasses.fields(groovix.melody.MelodyParams)}
	values: typing.Dict[str, typing.Any] = {}

	for key, value in overrides.items():

		if key not in known:
			logger.warning(f"Ignoring unknown melody setting '{key}'")
			continue

		values[key] = value

	if 'preferred_scale' in values:
		values['preferred_scale'] = _preferred_scale(values['preferred_scale'])

	if beats_per_bar is not None:
		values.setdefault('beats_per_bar', beats_per_bar)

	if seed is not None:
		values['seed'] = seed

	return groovix.melody.MelodyParams(**values)
