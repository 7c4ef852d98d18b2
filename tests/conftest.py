import json

import pytest

from emo import config


def make_record(name, unicode, keywords=(), definition=None, shortcode=None):
    return {
        "keywords": list(keywords),
        "unicode": unicode,
        "name": name,
        "shortcode": shortcode,
        "definition": definition,
    }


class ScriptedGenerator:
    """Generation double that replays fixed fragments and records how far it was pulled."""

    def __init__(self, fragments):
        self.fragments = fragments
        self.prompts = []
        self.pulled = 0
        self.closed = False

    def stream(self, prompt):
        self.prompts.append(prompt)
        return self._run()

    def _run(self):
        try:
            for fragment in self.fragments:
                self.pulled += 1
                yield fragment
        finally:
            self.closed = True


class RepeatingGenerator:
    """Always answers with its favourite emoji unless the prompt forbids it."""

    def __init__(self, preferences):
        self.preferences = preferences
        self.prompts = []

    def stream(self, prompt):
        self.prompts.append(prompt)
        forbidden = prompt.split("Do not use:", 1)[1] if "Do not use:" in prompt else ""
        for emoji in self.preferences:
            if emoji not in forbidden:
                return iter(["Sure", ": ", emoji])
        return iter(["I have no more ideas"])


@pytest.fixture(autouse=True)
def fresh_notices(monkeypatch):
    monkeypatch.setattr(config, "_EMITTED_NOTICES", set())


@pytest.fixture
def catalog():
    return [
        make_record("grinning face", "U+1F600", ["face", "grin", "happy"], "A yellow face with a broad grin."),
        make_record("smiling face", "U+263A", ["face", "smile", "relaxed"], "A calm face."),
        make_record("fire", "U+1F525", ["flame", "hot"], "A flame; something hot."),
        make_record("fire engine", "U+1F692", ["truck", "emergency"]),
        make_record("fireworks", "U+1F386", ["celebration"]),
        make_record("hot pepper", "U+1F336", ["spicy", "chili"], "Too hot to handle."),
        make_record("red heart", "U+2764", ["love"]),
        make_record("heavy black heart", "U+2764", ["love", "heart"]),
        make_record("sun", "U+2600", ["bright", "weather"], "Warm as a fire in the sky."),
    ]


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def write_config(config_home):
    def write(payload):
        path = config_home / "emo" / "config.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        return path

    return write


@pytest.fixture
def scripted_generator():
    return ScriptedGenerator


@pytest.fixture
def repeating_generator():
    return RepeatingGenerator


@pytest.fixture
def record():
    return make_record
