# =============================================================================
# tests/test_session.py - Session Record and Flash Tests
# =============================================================================

from core.session import Flash, SessionRecord


class TestSessionRecord:
    def test_new_record_has_id_and_no_data(self):
        record = SessionRecord()

        assert record.id
        assert record.is_new
        assert len(record) == 0

    def test_ids_are_unique(self):
        assert SessionRecord().id != SessionRecord().id

    def test_behaves_like_a_dict(self):
        record = SessionRecord(data={"returnTo": "/map"})

        record["visits"] = 1
        del record["returnTo"]

        assert dict(record) == {"visits": 1}
        assert record.data == {"visits": 1}


class TestFlash:
    def test_add_and_consume(self):
        session = SessionRecord()
        flash = Flash(session)

        flash.add("errors", {"msg": "Invalid email"})
        flash.add("errors", {"msg": "Missing name"})
        flash.add("info", "Saved")

        assert flash.consume() == {
            "errors": [{"msg": "Invalid email"}, {"msg": "Missing name"}],
            "info": ["Saved"],
        }
        assert "flash" not in session

    def test_messages_are_one_shot(self):
        flash = Flash(SessionRecord())
        flash.add("info", "hello")

        flash.consume()

        assert flash.consume() == {}

    def test_consume_single_category(self):
        session = SessionRecord()
        flash = Flash(session)
        flash.add("errors", "bad")
        flash.add("info", "good")

        assert flash.consume("errors") == ["bad"]
        assert flash.peek() == {"info": ["good"]}

        flash.consume("info")
        assert "flash" not in session

    def test_messages_live_in_the_session(self):
        """Flash state is plain session data, so it survives a store round trip."""
        session = SessionRecord()
        Flash(session).add("errors", {"msg": "x"})

        restored = SessionRecord(id=session.id, data=dict(session.data), is_new=False)

        assert Flash(restored).peek("errors") == [{"msg": "x"}]
