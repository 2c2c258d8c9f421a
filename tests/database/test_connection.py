import mysql.connector

from src.report_workflow.report_workflow.database.connection import DBConfig, DatabaseConnection


def test_config_defaults_from_settings_mapping():
    config = DBConfig.from_mapping({"host": "db", "user": "app", "password": None, "database": "reports"})

    assert config == DBConfig(host="db", port=3306, user="app", password="", database="reports", connect_timeout=10)


def test_each_connect_opens_a_fresh_connection(monkeypatch):
    calls = []
    monkeypatch.setattr(mysql.connector, "connect", lambda **kwargs: calls.append(kwargs) or object())

    first = DatabaseConnection(DBConfig("db-a", 3306, "app", "pw", "reports"))
    second = DatabaseConnection(DBConfig("db-b", 3307, "app", "pw", "reports"))

    assert first.connect() is not first.connect()
    second.connect()

    assert [c["host"] for c in calls] == ["db-a", "db-a", "db-b"]
    assert calls[2]["port"] == 3307
    assert calls[0]["autocommit"] is False
    assert calls[0]["connection_timeout"] == 10
