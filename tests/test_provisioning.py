"""
Tests for RepositoryProvisioner.

Covers:
- name / path / URL derivation
- bare repository creation and removal on disk
- failure modes (existing directory, absent directory on delete)
- construction from PlatformSettings
"""

import os

import pytest
from git import Repo

from paas.core.errors import RepositoryProvisionError
from paas.core.settings import PlatformSettings
from paas.schemas.apps import Application
from paas.services.provisioning import RepositoryProvisioner

from .conftest import GIT_HOST


# =====================================================================
# Derivation
# =====================================================================

class TestRepositoryNaming:

    def test_repository_name(self, provisioner):
        assert provisioner.repository_name(Application(name="someApp")) == "someApp.git"

    def test_repository_path_is_sibling_git_dir(self, provisioner, home):
        expected = os.path.normpath(os.path.join(str(home), "../git", "someApp.git"))
        assert provisioner.repository_path(Application(name="someApp")) == expected
        assert expected == str(home.parent / "git" / "someApp.git")

    def test_repository_url(self, provisioner):
        app = Application(name="foobar")
        assert provisioner.repository_url(app) == f"git@{GIT_HOST}:foobar.git"

    def test_url_does_not_depend_on_home(self, tmp_path):
        a = RepositoryProvisioner(home=str(tmp_path / "a"), git_host="git.example.com")
        b = RepositoryProvisioner(home=str(tmp_path / "b"), git_host="git.example.com")
        app = Application(name="foobar")
        assert a.repository_url(app) == b.repository_url(app) == "git@git.example.com:foobar.git"

    def test_git_root_override(self, tmp_path):
        root = tmp_path / "repos"
        p = RepositoryProvisioner(home=str(tmp_path / "home"), git_host=GIT_HOST, git_root=str(root))
        assert p.repository_path(Application(name="foobar")) == str(root / "foobar.git")

    @pytest.mark.parametrize("name", ["../x", "a/b", "/abs"])
    def test_path_outside_git_root_rejected(self, provisioner, name):
        unchecked = Application.model_construct(name=name, framework="", state=None, teams=[])
        with pytest.raises(RepositoryProvisionError, match="outside of git root"):
            provisioner.repository_path(unchecked)
        with pytest.raises(RepositoryProvisionError):
            provisioner.new_repository(unchecked)
        with pytest.raises(RepositoryProvisionError):
            provisioner.delete_repository(unchecked)


# =====================================================================
# Filesystem side effects
# =====================================================================

class TestRepositoryLifecycle:

    def test_new_repository_creates_bare_repo_with_config(self, provisioner):
        app = Application(name="foobar")
        path = provisioner.new_repository(app)

        assert path == provisioner.repository_path(app)
        assert os.path.isdir(path)
        assert os.path.isfile(os.path.join(path, "config"))
        assert Repo(path).bare

    def test_new_repository_fails_if_directory_exists(self, provisioner):
        app = Application(name="foobar")
        provisioner.new_repository(app)
        with pytest.raises(RepositoryProvisionError, match="already exists"):
            provisioner.new_repository(app)

    def test_new_repository_fails_when_root_is_not_a_directory(self, tmp_path):
        blocker = tmp_path / "git"
        blocker.write_text("not a directory")
        p = RepositoryProvisioner(home=str(tmp_path / "home"), git_host=GIT_HOST)
        with pytest.raises(RepositoryProvisionError) as exc_info:
            p.new_repository(Application(name="foobar"))
        assert exc_info.value.path == p.repository_path(Application(name="foobar"))

    def test_delete_repository(self, provisioner):
        app = Application(name="someApp")
        path = provisioner.new_repository(app)
        assert provisioner.delete_repository(app) is True
        assert not os.path.exists(path)

    def test_delete_missing_repository_is_not_an_error(self, provisioner):
        assert provisioner.delete_repository(Application(name="ghost")) is False

    def test_repositories_are_independent(self, provisioner):
        a, b = Application(name="app1"), Application(name="app2")
        provisioner.new_repository(a)
        provisioner.new_repository(b)
        provisioner.delete_repository(a)
        assert os.path.isdir(provisioner.repository_path(b))


# =====================================================================
# Settings
# =====================================================================

class TestFromSettings:

    def test_from_settings_reads_home_and_host(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        monkeypatch.setenv("GIT_HOST", "git.example.com")
        monkeypatch.delenv("GIT_ROOT", raising=False)
        p = RepositoryProvisioner.from_settings()
        app = Application(name="foobar")
        assert p.repository_path(app) == str(tmp_path / "git" / "foobar.git")
        assert p.repository_url(app) == "git@git.example.com:foobar.git"

    def test_from_explicit_settings(self, tmp_path):
        settings = PlatformSettings(HOME=str(tmp_path / "home"), GIT_ROOT=str(tmp_path / "r"))
        p = RepositoryProvisioner.from_settings(settings)
        assert p.git_host == "tsuru.plataformas.glb.com"
        assert p.repository_path(Application(name="x")) == str(tmp_path / "r" / "x.git")
