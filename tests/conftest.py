import re
import threading
import time

import pytest

from stockmeta.prompt_builder import PLATFORM_TASKS, build_prompt

_FILENAME_RE = re.compile(r"^Filename: (.*)$", re.MULTILINE)

# system prompt -> task; system prompts never contain the filename
_SYSTEM_TO_TASK = {
    build_prompt(task, "probe", platform)[0]: task
    for platform, tasks in PLATFORM_TASKS.items()
    for task in tasks
}


class FakeClient:
    """Stands in for CompletionClient; answers per task, optionally per filename."""

    def __init__(self, answers=None, failures=None, delays=None):
        self.answers = answers or {}
        self.failures = failures or {}
        self.delays = delays or {}
        self.calls = []
        self._lock = threading.Lock()

    def complete(self, system, user, temperature=0.0, max_tokens=500):
        task = _SYSTEM_TO_TASK[system]
        filename = _FILENAME_RE.search(user).group(1)
        with self._lock:
            self.calls.append({"task": task, "filename": filename, "user": user,
                               "temperature": temperature, "max_tokens": max_tokens})

        delay = self.delays.get(filename)
        if delay:
            time.sleep(delay)

        failure = self.failures.get((filename, task)) or self.failures.get(filename)
        if failure is not None:
            raise failure

        answer = self.answers.get((filename, task), self.answers.get(task, ""))
        return answer(filename) if callable(answer) else answer

    def tasks_for(self, filename):
        return [c["task"] for c in self.calls if c["filename"] == filename]


@pytest.fixture
def fake_client():
    return FakeClient(answers={
        "title": "Expand arrows icon",
        "description": "Minimal expand arrows for interfaces",
        "keywords": "expand, arrow, 2, resize",
        "category": "3",
    })


@pytest.fixture
def settings_db(tmp_path, monkeypatch):
    path = tmp_path / "settings.db"
    monkeypatch.setenv("STOCKMETA_DB_PATH", str(path))
    import stockmeta.database as db
    db.init_db()
    return db
