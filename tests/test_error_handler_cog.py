"""Tests for app command error routing."""

from discord import app_commands

from cogs.error_handler_cog import GENERIC_ERROR_MESSAGE, NO_PERMISSION_MESSAGE, ErrorHandlerCog

from conftest import FakeUser, make_interaction


class TestErrorHandler:
    def test_registers_tree_error_handler(self, fake_bot):
        ErrorHandlerCog(fake_bot)
        fake_bot.tree.error.assert_called_once()

    async def test_check_failure_replies_no_permission(self, fake_bot):
        cog = ErrorHandlerCog(fake_bot)
        interaction = make_interaction(FakeUser(1, "alice"))

        await cog.on_app_command_error(interaction, app_commands.CheckFailure())

        interaction.response.send_message.assert_awaited_once_with(NO_PERMISSION_MESSAGE, ephemeral=True)

    async def test_unexpected_error_uses_followup_when_already_responded(self, fake_bot, capsys):
        cog = ErrorHandlerCog(fake_bot)
        interaction = make_interaction(FakeUser(1, "alice"))
        interaction.response.is_done.return_value = True

        await cog.on_app_command_error(interaction, app_commands.AppCommandError("boom"))

        interaction.followup.send.assert_awaited_once_with(GENERIC_ERROR_MESSAGE, ephemeral=True)
        assert "Unhandled app command error: boom" in capsys.readouterr().out
