import subprocess
from types import SimpleNamespace

import pytest

from hostlore import session
from hostlore.session import open_session, session_command
from hostlore.session_settings import SessionSettings
from hostlore.types import Host
from hostlore.utils import FatalError

host = Host(fqdn="db4.cluster3.company.net", kind="longquery")

def test_default_command():
    assert session_command(host) == ["ssh", "-A", "-t", "db4.cluster3.company.net"]

def test_extra_arguments_are_appended():
    assert session_command(host, ["uptime", "-p"]) == ["ssh", "-A", "-t", "db4.cluster3.company.net", "uptime", "-p"]

def test_settings_overlay():
    settings = SessionSettings(options=["-l", "{{ host.kind }}"], destination="admin@{{ host.fqdn }}")
    assert session_command(host, settings=settings) == ["ssh", "-l", "longquery", "admin@db4.cluster3.company.net"]

    settings = SessionSettings(program="mosh", options=[])
    assert session_command(host, settings=settings) == ["mosh", "db4.cluster3.company.net"]

def test_overlay_keeps_unset_values():
    base = SessionSettings(program="ssh", options=["-A"], destination="{{ host.fqdn }}")
    assert base.overlay(SessionSettings()) == base
    assert base.overlay(SessionSettings(program="mosh")).options == ["-A"]
    assert repr(SessionSettings(program="mosh")) == "SessionSettings{program=mosh}"

def test_incomplete_settings():
    with pytest.raises(ValueError, match=r"incomplete session settings"):
        SessionSettings(program="ssh").resolve()

def test_undefined_template_variable():
    with pytest.raises(FatalError, match=r"Invalid session template"):
        session_command(host, settings=SessionSettings(destination="{{ user }}@{{ host.fqdn }}"))

def test_open_session(monkeypatch):
    calls = []
    def fake_run(command, check):
        calls.append(command)
        return subprocess.CompletedProcess(command, 0)
    monkeypatch.setattr(session.shutil, "which", lambda program: f"/usr/bin/{program}")
    monkeypatch.setattr(session.subprocess, "run", fake_run)

    open_session(host, ["hostname"])
    assert calls == [["/usr/bin/ssh", "-A", "-t", "db4.cluster3.company.net", "hostname"]]

def test_open_session_failure(monkeypatch):
    monkeypatch.setattr(session.shutil, "which", lambda program: f"/usr/bin/{program}")
    monkeypatch.setattr(session.subprocess, "run", lambda command, check: SimpleNamespace(returncode=255))

    with pytest.raises(FatalError, match=r"ssh command failed: exit status 255"):
        open_session(host)

def test_open_session_missing_program(monkeypatch):
    monkeypatch.setattr(session.shutil, "which", lambda program: None)
    with pytest.raises(FatalError, match=r"could not find 'ssh'"):
        open_session(host)
