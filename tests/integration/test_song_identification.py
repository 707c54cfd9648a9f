"""Integration tests for recording and identifying a song."""

import asyncio

import pytest

from mediamuse.audio.recorder import CaptureController, RECORDING_MIME_TYPE
from mediamuse.errors import MicrophonePermissionError, RemoteCallError
from mediamuse.gateway.model_gateway import IDENTIFY_PROMPT, ModelGateway
from mediamuse.models.status import RequestStatus
from mediamuse.services.song_identifier import SongIdentifierController


@pytest.fixture
def identifier(mock_pyaudio, fake_gateway):
    ctrl = SongIdentifierController(fake_gateway, CaptureController())
    yield ctrl
    ctrl.close()


async def record_and_stop(identifier, seconds=0.05):
    await identifier.start_recording()
    await asyncio.sleep(seconds)
    return await identifier.stop_recording()


@pytest.mark.integration
class TestSongIdentification:

    def test_stop_identifies_recording(self, identifier, fake_gateway, mock_pyaudio):
        seen = []
        identifier.tracker.add_listener(lambda name, status: seen.append(status))

        status = asyncio.run(record_and_stop(identifier))

        assert status is RequestStatus.SUCCESS
        assert seen == [RequestStatus.LOADING, RequestStatus.SUCCESS]
        fake_gateway.identify_song.assert_awaited_once()
        asset = fake_gateway.identify_song.await_args.args[0]
        assert asset.mime_type == RECORDING_MIME_TYPE
        assert identifier.result.text == "Artist: Queen\nTitle: Bohemian Rhapsody"
        assert identifier.result.audio_bytes == asset.size_bytes
        mock_pyaudio['stream'].close.assert_called_once()

    def test_identification_failure_still_releases_device(self, identifier, fake_gateway, mock_pyaudio):
        fake_gateway.identify_song.side_effect = RemoteCallError("offline")

        status = asyncio.run(record_and_stop(identifier))

        assert status is RequestStatus.ERROR
        assert identifier.tracker.error_message == RemoteCallError.user_message
        mock_pyaudio['stream'].close.assert_called_once()
        mock_pyaudio['instance'].terminate.assert_called_once()

    def test_stop_while_idle_is_noop(self, identifier, fake_gateway):
        assert asyncio.run(identifier.stop_recording()) is RequestStatus.IDLE
        fake_gateway.identify_song.assert_not_awaited()

    def test_new_recording_clears_previous_result(self, identifier):
        async def scenario():
            await record_and_stop(identifier)
            assert identifier.status is RequestStatus.SUCCESS
            await identifier.start_recording()
            assert identifier.status is RequestStatus.IDLE
            assert identifier.result is None
            assert identifier.is_recording is True
            await identifier.stop_recording()

        asyncio.run(scenario())

    def test_microphone_denied(self, identifier, fake_gateway, mock_pyaudio):
        mock_pyaudio['instance'].open.side_effect = OSError("denied")

        with pytest.raises(MicrophonePermissionError):
            asyncio.run(identifier.start_recording())

        assert identifier.is_recording is False
        assert identifier.status is RequestStatus.IDLE
        fake_gateway.identify_song.assert_not_awaited()

    def test_close_while_recording_releases_device(self, identifier, mock_pyaudio):
        asyncio.run(identifier.start_recording())
        identifier.close()
        mock_pyaudio['stream'].close.assert_called_once()

    def test_single_call_with_fixed_prompt(self, mock_pyaudio, mock_genai_client, default_config, responses):
        mock_genai_client.aio.models.generate_content.return_value = responses.text("Daft Punk - One More Time")
        identifier = SongIdentifierController(ModelGateway(mock_genai_client, default_config), CaptureController())
        try:
            status = asyncio.run(record_and_stop(identifier))
        finally:
            identifier.close()

        assert status is RequestStatus.SUCCESS
        assert identifier.result.text == "Daft Punk - One More Time"
        mock_genai_client.aio.models.generate_content.assert_awaited_once()
        parts = mock_genai_client.aio.models.generate_content.await_args.kwargs["contents"][0].parts
        assert parts[0].inline_data.mime_type == "audio/wav"
        assert parts[1].text == IDENTIFY_PROMPT

    def test_late_identification_after_new_recording_is_discarded(self, identifier, fake_gateway):
        calls = []

        async def identify(asset):
            calls.append(asset)
            if len(calls) == 1:
                await identifier.start_recording()
                return "Late answer for the first clip"
            return "Artist: Daft Punk\nTitle: One More Time"

        fake_gateway.identify_song.side_effect = identify

        async def scenario():
            first = await record_and_stop(identifier)
            assert first is RequestStatus.IDLE
            assert identifier.result is None
            assert identifier.is_recording is True
            await asyncio.sleep(0.05)
            return await identifier.stop_recording()

        assert asyncio.run(scenario()) is RequestStatus.SUCCESS
        assert identifier.result.text == "Artist: Daft Punk\nTitle: One More Time"
        assert len(calls) == 2

    def test_unexpected_identification_failure_lands_in_error(self, identifier, fake_gateway, mock_pyaudio):
        fake_gateway.identify_song.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            asyncio.run(record_and_stop(identifier))

        assert identifier.status is RequestStatus.ERROR
        assert identifier.is_recording is False
        mock_pyaudio['stream'].close.assert_called_once()
