"""Tests for importing settings from the KS-APW installation."""

import pytest

from ksaow_monitor.config import auto_configure, interview, load_monitor_config
from ksaow_monitor.errors import ConfigurationError
from ksaow_monitor.modules.bootstrap import (
    descriptor_from_apman,
    find_apman_ini,
    find_license_file,
    parse_apman_ini,
    read_license_client_id,
)
from ksaow_monitor.modules.connection import BackendKind

FB_APMAN = """[PARAMETRY]
ALIAS_BAZY=APTEKA
OPIS=Apteka Łódź Śródmieście

[APTEKA]
DB_TYPE=FB
DB_SERVER=192.168.1.5
DB_USER=apw_user
DB_PATH=D:\\KSBAZA\\WAPTEKA.FDB

[INNA]
DB_TYPE=ORACLE
"""

ORACLE_APMAN = """[PARAMETRY]
ALIAS_BAZY=ORA
[ORA]
DB_TYPE=ORACLE
DB_SERVER=dbhost:1521/ORCL
DB_USER=apw_user
DB_PATH=
"""

LICENSE_XML = """<?xml version="1.0" encoding="windows-1250"?>
<ks:licencja xmlns:ks="http://www.kamsoft.pl/ks">
  <ks:nazwa>Apteka Pod Różą</ks:nazwa>
  <ks:klient>
    <ks:id-knt-ks>48213</ks:id-knt-ks>
  </ks:klient>
</ks:licencja>
"""


@pytest.fixture
def install_dir(temp_dir):
    root = temp_dir / "KS-APW"
    (root / "KS" / "APW").mkdir(parents=True)
    (root / "APW" / "AP").mkdir(parents=True)
    return root


def write_apman(install_dir, text):
    path = install_dir / "KS" / "APW" / "apman.ini"
    path.write_bytes(text.encode("cp1250"))
    return path


def write_license(install_dir, text=LICENSE_XML):
    path = install_dir / "APW" / "AP" / "licencja_aow.xml"
    path.write_bytes(text.encode("cp1250"))
    return path


class TestApman:
    def test_find_in_install_path(self, install_dir):
        path = write_apman(install_dir, FB_APMAN)
        assert find_apman_ini(install_path=install_dir, drive_roots=[]) == path

    def test_find_on_drive_root(self, temp_dir):
        drive = temp_dir / "D"
        (drive / "KS" / "APW").mkdir(parents=True)
        (drive / "KS" / "APW" / "apman.ini").write_text("", encoding="cp1250")
        found = find_apman_ini(install_path=temp_dir / "nowhere", drive_roots=[temp_dir / "C", drive])
        assert found == drive / "KS" / "APW" / "apman.ini"

    def test_not_found(self, temp_dir):
        assert find_apman_ini(install_path=temp_dir, drive_roots=[]) is None

    def test_parse_firebird_alias(self, install_dir):
        settings = parse_apman_ini(write_apman(install_dir, FB_APMAN))

        assert settings.alias == "APTEKA"
        assert settings.db_type == "FB"
        assert settings.db_path == "D:\\KSBAZA\\WAPTEKA.FDB"

        descriptor = descriptor_from_apman(settings)
        assert descriptor.backend is BackendKind.FIREBIRD
        assert descriptor.server == "192.168.1.5"
        assert descriptor.port == 3050

    def test_parse_oracle_server(self, install_dir):
        descriptor = descriptor_from_apman(parse_apman_ini(write_apman(install_dir, ORACLE_APMAN)))

        assert descriptor.backend is BackendKind.ORACLE
        assert descriptor.server == "dbhost"
        assert descriptor.port == 1521
        assert descriptor.database_path == "/ORCL"

    def test_missing_alias_section(self, install_dir):
        path = write_apman(install_dir, "[PARAMETRY]\nALIAS_BAZY=GONE\n")
        with pytest.raises(ConfigurationError, match="GONE"):
            parse_apman_ini(path)

    def test_missing_parameters(self, install_dir):
        path = write_apman(install_dir, "[APTEKA]\nDB_TYPE=FB\n")
        with pytest.raises(ConfigurationError, match="PARAMETRY"):
            parse_apman_ini(path)


class TestLicense:
    def test_client_id(self, install_dir):
        path = write_license(install_dir)
        assert find_license_file(install_path=install_dir, drive_roots=[]) == path
        assert read_license_client_id(path) == "48213"

    def test_utf8_license(self, temp_dir):
        path = temp_dir / "licencja_aow.xml"
        path.write_text(LICENSE_XML.replace("windows-1250", "utf-8"), encoding="utf-8")
        assert read_license_client_id(path) == "48213"

    def test_missing_element(self, temp_dir):
        path = temp_dir / "licencja_aow.xml"
        path.write_text('<licencja xmlns="http://www.kamsoft.pl/ks"/>', encoding="utf-8")
        assert read_license_client_id(path) is None

    def test_malformed(self, temp_dir):
        path = temp_dir / "licencja_aow.xml"
        path.write_text("<not-closed>", encoding="utf-8")
        assert read_license_client_id(path) is None

    def test_missing_file(self, temp_dir):
        assert read_license_client_id(temp_dir / "none.xml") is None


class TestAutoConfigure:
    def test_derives_password_from_client_id(self, install_dir, temp_dir, vault):
        config_path = temp_dir / "home" / "config.ini"

        config = auto_configure(
            "https://hooks.example.com/x\n",
            config_path,
            vault,
            apman_path=write_apman(install_dir, FB_APMAN),
            license_path=write_license(install_dir),
        )

        assert vault.reveal(config.encrypted_password) == "apw_user48213"
        assert config.webhook_url == "https://hooks.example.com/x"
        assert load_monitor_config(config_path, vault) == config

    def test_rejects_other_user(self, install_dir, temp_dir, vault):
        apman = write_apman(install_dir, FB_APMAN.replace("DB_USER=apw_user", "DB_USER=SYSDBA"))
        with pytest.raises(ConfigurationError, match="SYSDBA"):
            auto_configure(
                "https://h", temp_dir / "config.ini", vault,
                apman_path=apman, license_path=write_license(install_dir),
            )

    def test_requires_client_id(self, install_dir, temp_dir, vault):
        with pytest.raises(ConfigurationError, match="client id"):
            auto_configure(
                "https://h", temp_dir / "config.ini", vault,
                apman_path=write_apman(install_dir, FB_APMAN),
                license_path=temp_dir / "missing.xml",
            )


class TestInterview:
    def test_saves_answers(self, install_dir, temp_dir, vault):
        config_path = temp_dir / "config.ini"

        config = interview(
            config_path,
            vault,
            apman_path=write_apman(install_dir, ORACLE_APMAN),
            read_secret=lambda prompt: "s3cret",
            read_line=lambda prompt: "  https://hooks.example.com/y \n",
        )

        assert config.webhook_url == "https://hooks.example.com/y"
        assert config.database_type == "ORACLE"
        assert vault.reveal(config.encrypted_password) == "s3cret"
        assert config_path.exists()

    def test_webhook_required(self, install_dir, temp_dir, vault):
        with pytest.raises(ConfigurationError, match="Webhook"):
            interview(
                temp_dir / "config.ini",
                vault,
                apman_path=write_apman(install_dir, FB_APMAN),
                read_secret=lambda prompt: "pw",
                read_line=lambda prompt: "",
            )
