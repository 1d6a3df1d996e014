import logging
import os

import pytest

from receiver_helpers import append, log4net_event
from logtail.models.errors import SourceUnavailableError
from logtail.receivers.dir_receiver import natural_sort_key, natural_sorted
from logtail.receivers.message_buffer import MessageBuffer
from logtail.receivers.nlog_dir_receiver import NLogDirReceiver
from logtail.receivers.receiver_base import ReceiverState


def test_natural_sort():
    assert natural_sorted(["log.10", "log.2", "log.1", "log"]) == ["log", "log.1", "log.2", "log.10"]
    assert natural_sort_key("App.LOG.3") == ["app.log.", 3, ""]


@pytest.fixture
def rotated_dir(tmp_path):
    append(str(tmp_path / "cur.log"), log4net_event("cur"))
    append(str(tmp_path / "cur.log.1"), log4net_event("cur.1"))
    append(str(tmp_path / "cur.log.2"), log4net_event("cur.2"))
    append(str(tmp_path / "notes.txt"), "not a log")
    return tmp_path


def test_backlog_replayed_oldest_first(fake_watch, rotated_dir):
    receiver = NLogDirReceiver(str(rotated_dir), start_from_beginning=True)
    buffer = MessageBuffer()
    receiver.initialize(buffer)

    assert [m.message for m in buffer.messages] == ["cur.2", "cur.1", "cur"]
    assert [m.number for m in buffer.messages] == [1, 2, 3]
    assert receiver.current_file == os.path.abspath(str(rotated_dir / "cur.log"))
    assert fake_watch[-1].path == os.path.abspath(str(rotated_dir))


def test_collect_files_uses_pattern_on_full_path(rotated_dir):
    receiver = NLogDirReceiver(str(rotated_dir), filename_pattern=r"cur\.log\.\d+$")
    names = [os.path.basename(p) for p in receiver.collect_files()]
    assert names == ["cur.log.1", "cur.log.2"]


def test_without_backlog_only_new_records(fake_watch, rotated_dir):
    receiver = NLogDirReceiver(str(rotated_dir))
    buffer = MessageBuffer()
    receiver.initialize(buffer)
    assert buffer.messages == []

    head = str(rotated_dir / "cur.log")
    append(head, log4net_event("fresh"))
    receiver.handle_file_changed(head)
    # изменения архивных файлов не читаются
    append(str(rotated_dir / "cur.log.1"), log4net_event("ignored"))
    receiver.handle_file_changed(str(rotated_dir / "cur.log.1"))

    assert [m.message for m in buffer.messages] == ["fresh"]
    assert buffer.messages[0].number == 1


def test_file_created_in_empty_directory(fake_watch, tmp_path):
    receiver = NLogDirReceiver(str(tmp_path))
    buffer = MessageBuffer()
    receiver.initialize(buffer)
    assert receiver.current_file is None

    append(str(tmp_path / "readme.md"), "text")
    receiver.handle_file_created(str(tmp_path / "readme.md"))
    assert receiver.current_file is None

    path = str(tmp_path / "service.log")
    append(path, log4net_event("first"))
    receiver.handle_file_created(path)
    assert receiver.current_file == os.path.abspath(path)
    assert [m.message for m in buffer.messages] == ["first"]

    append(path, log4net_event("second"))
    receiver.handle_file_changed(path)
    assert [m.number for m in buffer.messages] == [1, 2]


def test_new_head_name_needs_reset(fake_watch, rotated_dir, caplog):
    receiver = NLogDirReceiver(str(rotated_dir))
    buffer = MessageBuffer()
    receiver.initialize(buffer)

    # app.log встаёт в списке перед cur.log
    new_file = str(rotated_dir / "app.log")
    append(new_file, log4net_event("new head"))
    with caplog.at_level(logging.WARNING):
        receiver.handle_file_created(new_file)

    assert buffer.messages == []
    assert receiver.current_file == os.path.abspath(str(rotated_dir / "cur.log"))
    assert "reset()" in caplog.text


def test_missing_directory(fake_watch, tmp_path):
    receiver = NLogDirReceiver(str(tmp_path / "absent"))
    with pytest.raises(SourceUnavailableError):
        receiver.initialize(MessageBuffer())
    assert receiver.state == ReceiverState.CLOSED
    assert not receiver.can_handle_source()


def test_can_handle_source(tmp_path, rotated_dir):
    assert NLogDirReceiver(str(tmp_path / "absent")).can_handle_source() is False
    assert NLogDirReceiver(str(rotated_dir)).can_handle_source()

    syslog_dir = tmp_path / "syslog"
    syslog_dir.mkdir()
    append(str(syslog_dir / "messages.log"), "<13>Feb  5 17:32:18 web-01 nginx: started\n")
    assert not NLogDirReceiver(str(syslog_dir)).can_handle_source()

    empty_dir = tmp_path / "empty"
    empty_dir.mkdir()
    assert NLogDirReceiver(str(empty_dir)).can_handle_source()


def test_invalid_filename_pattern(tmp_path):
    with pytest.raises(ValueError):
        NLogDirReceiver(str(tmp_path), filename_pattern="([unclosed")


def test_description(tmp_path):
    receiver = NLogDirReceiver(str(tmp_path))
    assert receiver.description == f"NLog Dir Receiver ({tmp_path.name})"
    assert receiver.tooltip == str(tmp_path)


def test_rename_rotation_continues_with_new_head(fake_watch, rotated_dir, caplog):
    head = str(rotated_dir / "cur.log")
    receiver = NLogDirReceiver(str(rotated_dir))
    buffer = MessageBuffer()
    receiver.initialize(buffer)

    append(head, log4net_event("before rotation"))
    receiver.handle_file_changed(head)

    os.replace(str(rotated_dir / "cur.log.2"), str(rotated_dir / "cur.log.3"))
    os.replace(str(rotated_dir / "cur.log.1"), str(rotated_dir / "cur.log.2"))
    os.replace(head, str(rotated_dir / "cur.log.1"))
    append(head, log4net_event("after rotation"))

    with caplog.at_level(logging.WARNING):
        receiver.handle_file_created(str(rotated_dir / "cur.log.1"))
        receiver.handle_file_created(head)
        receiver.handle_file_changed(head)

    assert [m.message for m in buffer.messages] == ["before rotation", "after rotation"]
    assert [m.number for m in buffer.messages] == [1, 2]
    assert "reset()" not in caplog.text


def test_current_file_recreated(fake_watch, rotated_dir):
    head = str(rotated_dir / "cur.log")
    receiver = NLogDirReceiver(str(rotated_dir), start_from_beginning=True)
    buffer = MessageBuffer()
    receiver.initialize(buffer)

    os.remove(head)
    receiver.handle_file_changed(head)
    append(head, log4net_event("recreated"))
    receiver.handle_file_created(head)

    assert [m.message for m in buffer.messages] == ["cur.2", "cur.1", "cur", "recreated"]
