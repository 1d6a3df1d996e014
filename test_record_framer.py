from logtail.framing.record_framer import LineRecordFramer, TagRecordFramer

END = "</log4j:event>"
EVENT = '<log4j:event logger="A" timestamp="1" level="INFO"><log4j:message>hi</log4j:message></log4j:event>'


def test_single_character_chunks_across_marker():
    framer = TagRecordFramer(END)
    records = []
    for ch in EVENT:
        records.extend(framer.feed(ch))
        if len(records) == 0:
            assert EVENT.startswith(framer.pending)
    assert records == [EVENT]
    assert framer.pending == ""


def test_two_events_on_one_line():
    framer = TagRecordFramer(END)
    records = framer.feed(EVENT + EVENT + "<log4j:ev")
    assert records == [EVENT, EVENT]
    assert framer.pending == "<log4j:ev"


def test_marker_at_index_zero():
    framer = TagRecordFramer(END)
    assert framer.feed(END + "<log4j:") == [END]
    assert framer.pending == "<log4j:"


def test_line_breaks_removed_inside_record():
    framer = TagRecordFramer(END)
    records = framer.feed('<log4j:event logger="A"\r\n  level="INFO">\n</log4j:event>\n')
    assert records == ['<log4j:event logger="A"  level="INFO"></log4j:event>']
    assert framer.pending == ""


def test_reset_discards_pending():
    framer = TagRecordFramer(END)
    framer.feed("<log4j:event")
    framer.reset()
    assert framer.pending == ""


def test_line_framer_keeps_unterminated_line():
    framer = LineRecordFramer()
    assert framer.feed("first line\r\nsecond") == ["first line"]
    assert framer.pending == "second"
    assert framer.feed(" half\n\n   \nthird\n") == ["second half", "third"]
    assert framer.pending == ""
