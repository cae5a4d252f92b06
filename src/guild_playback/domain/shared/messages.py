"""Centralized message constants for error messages, log templates, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    EMPTY_TRACK_LINK = "Track link cannot be empty"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_SNOWFLAKE = "Discord ID must be a positive integer"
    SNOWFLAKE_TOO_LARGE = "Discord ID must be less than 2^64"
    INVALID_SNOWFLAKE_LIST = "Expected a list of Discord IDs, got {value!r}"
    RESOLVED_EXCEEDS_TARGET = "Resolution batch progress ({done}) exceeds its target ({target})"
    QUEUED_EXCEEDS_RESOLVED = "Queued count ({queued}) exceeds resolved count ({resolved})"
    SESSION_CLOSED = "Session for guild {guild_id} has been closed"
    SPOTIFY_CREDENTIALS_MISSING = "SPOTIFY__CLIENT_ID and SPOTIFY__CLIENT_SECRET must be set"
    SPOTIFY_REQUEST_FAILED = "Spotify request failed ({status}) for {path}"
    SPOTIFY_UNSUPPORTED_LINK = "Not a Spotify track, album or playlist link"
    SPOTIFY_BAD_RESPONSE = "Spotify returned an unreadable response for {path}"
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates; pass values as logger arguments, not pre-formatted."""

    # Metadata
    METADATA_CACHE_HIT = "Metadata cache hit for %s"
    METADATA_JOIN_INFLIGHT = "Joining in-flight metadata lookup for %s"
    METADATA_FETCHED = "Fetched metadata for %s track %s"
    METADATA_UNAVAILABLE = "Metadata unavailable for %s (%s): %s"
    METADATA_CACHE_PRUNED = "Pruned %d expired metadata cache entries"

    # Queue / session
    QUEUE_ENQUEUED = "Enqueued %d track(s) in guild %s (front=%s, was_playing=%s)"
    QUEUE_SHUFFLED = "Shuffled %d upcoming track(s) in guild %s"
    QUEUE_ADVANCED = "Advanced queue in guild %s; now playing %s"
    QUEUE_EXHAUSTED = "Queue exhausted in guild %s; session is idle"
    PLAYBACK_PAUSED = "Paused playback in guild %s"
    PLAYBACK_RESUMED = "Resumed playback in guild %s"
    SESSION_CREATED = "Created playback session for guild %s"
    SESSION_REMOVED = "Removed playback session for guild %s"
    SESSION_CLOSED_TASKS = "Cancelling %d background task(s) for guild %s"

    # Resolution pipeline
    RESOLUTION_STARTED = "Resolving %d queries for guild %s"
    RESOLUTION_FAILED = "Resolution failed for %r: %s"
    RESOLUTION_COMPLETED = "Resolution batch for guild %s done: %d queued, %d failed of %d"
    RESOLUTION_SESSION_GONE = "Session for guild %s is gone; stopping resolution batch"
    PROGRESS_CALLBACK_FAILED = "Progress callback failed: %r"

    # yt-dlp
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info from %s"
    YTDLP_FAILED_SEARCH = "Failed to search for %r"
    YTDLP_FAILED_EXTRACT_PLAYLIST = "Failed to extract playlist from %s"
    YTDLP_NO_SEARCH_RESULTS = "No search results for %r"
    YTDLP_POT_CONFIGURED = "bgutil-ytdlp-pot-provider configured (server=%s)"

    # Spotify
    SPOTIFY_TOKEN_REFRESHED = "Refreshed Spotify access token (expires in %ss)"
    SPOTIFY_EXPANDED = "Expanded Spotify %s %s into %d queries"
    SPOTIFY_CLOSE_FAILED = "Failed closing Spotify HTTP client: %r"

    # Play command
    PLAY_FAILED = "Play request failed in guild %s [%s]: %s"
    PLAY_BATCH_STARTED = "Queued first track in guild %s, resolving %d more in background"

    # Application lifecycle
    BOT_STARTING = "Starting guild playback bot in %s mode"
    BOT_CONFIG_SUMMARY = (
        "Sync guilds: %d, resolution concurrency: %d, progress every %ss, Spotify %s"
    )
    LOGGING_CONFIG_UNAVAILABLE = "Could not load logging config %s (%s); using console defaults"
    BOT_SYNC_SKIPPED = "Command sync skipped; set DISCORD__SYNC_ON_STARTUP to enable"
    BOT_SETUP = "Setting up bot..."
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_READY = "Bot ready as %s (%s)"
    BOT_STOPPED = "Bot stopped"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"
    BOT_SYNCED_GUILD = "Synced %s commands to guild %s"
    BOT_SYNCED_GLOBAL = "Synced %s commands globally"
    BOT_SYNC_GUILD_FAILED = "Failed to sync commands to guild %s: %s"
    BOT_SYNC_GLOBAL_FAILED = "Failed to sync commands globally: %s"
    BOT_SYNC_ON_STARTUP_FAILED = "Command sync on startup failed: %s"
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_CONNECTED_GUILDS = "Connected to %d guild(s)"
    BOT_ERROR_MESSAGE_SEND_FAILED = "Could not send error message to user"
    BOT_CONTAINER_SHUTDOWN = "Container shut down; closed %d session(s)"
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %ss"
    REPLY_EDIT_FAILED = "Could not update interaction reply: %s"
    BOT_SLASH_COMMAND_ERROR = "Slash command error in '%s': %s"
    BOT_VOICE_TEARDOWN = "Voice connection closed in guild %s; dropping session"


class DiscordUIMessages:
    """User-facing strings shown in Discord replies."""

    # Play flow
    NOW_PLAYING_AUTHOR = "\U0001f50a Now Playing"
    NOW_PLAYING_WITH_QUEUED = "Now playing: {title}\nQueued {count} tracks."
    QUEUED_MANY = "Queued {count} tracks."
    QUEUED_AT_POSITION = "Queued at position #{position}: {title}"
    METADATA_UNAVAILABLE = (
        "Could not fetch video details."
        " This video probably cannot be played for some reason."
        " This can happen if the video is age-restricted or region-locked."
    )
    FIRST_QUERY_NOT_FOUND = "Could not find a match for: {query}"
    FETCHING_REMAINING = "Fetching the other {count} tracks from YouTube..."
    PROGRESS_PARTIAL = "Queued {queued} tracks.\nFetching the other {remaining} tracks from YouTube..."
    PROGRESS_DONE = "Queued {queued} tracks from YouTube."
    PROGRESS_FAILED_SUFFIX = "Could not find {failed} tracks."
    RESUMED = "Resumed."

    # Errors
    ERROR_NO_ARGUMENTS = "You must provide at least one argument."
    ERROR_INVALID_YOUTUBE_LINK = "Invalid YouTube link."
    ERROR_NOT_IN_VOICE = "You must be connected to a voice channel."
    ERROR_CANNOT_JOIN_VOICE = "I don't have permission to connect to your voice channel."
    ERROR_GUILD_ONLY = "This command can only be used in a server."
    ERROR_UNRESOLVED_USER = "Could not resolve user invoking command."
    ERROR_COMMAND_FAILED = "\u274c {error}"
    ERROR_UNEXPECTED = "\u274c Something went wrong while running that command."

    # Controls
    PAUSED = "⏸️ Paused."
    ALREADY_PAUSED = "Playback is already paused."
    RESUMED_PLAYBACK = "▶️ Resumed."
    NOT_PAUSED = "Playback is not paused."
    SHUFFLED = "\U0001f500 Shuffled {count} upcoming tracks."
    NOTHING_PLAYING = "Nothing is playing."
