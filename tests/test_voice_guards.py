"""Tests for the voice-channel guard helpers used by slash commands."""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from guild_playback.domain.shared.messages import DiscordUIMessages
from guild_playback.infrastructure.discord.guards.voice_guards import (
    get_joinable_voice_channel,
    get_member,
    send_ephemeral,
)


@pytest.fixture
def interaction():
    interaction = MagicMock()
    interaction.guild = MagicMock()
    interaction.response.is_done = MagicMock(return_value=True)
    interaction.followup.send = AsyncMock()
    interaction.response.send_message = AsyncMock()
    return interaction


@pytest.fixture
def member():
    member = MagicMock(spec=discord.Member)
    member.voice = MagicMock()
    member.voice.channel = MagicMock()
    member.voice.channel.permissions_for.return_value.connect = True
    return member


def _sent(interaction) -> str:
    return interaction.followup.send.call_args[0][0]


class TestSendEphemeral:
    @pytest.mark.asyncio
    async def test_fresh_interaction_uses_response(self, interaction):
        interaction.response.is_done.return_value = False

        await send_ephemeral(interaction, "hi")

        interaction.response.send_message.assert_awaited_once_with("hi", ephemeral=True)
        interaction.followup.send.assert_not_called()


class TestGetMember:
    @pytest.mark.asyncio
    async def test_outside_guild(self, interaction):
        interaction.guild = None

        assert await get_member(interaction) is None
        assert _sent(interaction) == DiscordUIMessages.ERROR_GUILD_ONLY

    @pytest.mark.asyncio
    async def test_non_member_user(self, interaction):
        interaction.user = MagicMock(spec=discord.User)

        assert await get_member(interaction) is None
        assert _sent(interaction) == DiscordUIMessages.ERROR_UNRESOLVED_USER


class TestJoinableVoiceChannel:
    """Tests for get_joinable_voice_channel."""

    @pytest.mark.asyncio
    async def test_returns_member_channel(self, interaction, member):
        interaction.user = member

        assert await get_joinable_voice_channel(interaction) is member.voice.channel
        interaction.followup.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_member_not_in_voice(self, interaction, member):
        member.voice = None
        interaction.user = member

        assert await get_joinable_voice_channel(interaction) is None
        assert _sent(interaction) == DiscordUIMessages.ERROR_NOT_IN_VOICE

    @pytest.mark.asyncio
    async def test_missing_connect_permission(self, interaction, member):
        member.voice.channel.permissions_for.return_value.connect = False
        interaction.user = member

        assert await get_joinable_voice_channel(interaction) is None
        assert _sent(interaction) == DiscordUIMessages.ERROR_CANNOT_JOIN_VOICE
