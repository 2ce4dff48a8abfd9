"""Centralized message constants for error messages, validation, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Discord ID Validation Errors
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"
    SNOWFLAKE_TOO_LARGE = "Discord snowflake ID exceeds maximum value (2^64)"
    INVALID_SNOWFLAKE_LIST = "Expected a list of Discord snowflake IDs"

    # Settings Validation Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"

    # Queue position errors (user facing, 1-based)
    NO_TRACKS_TO_REMOVE = "No songs available to remove."
    NO_TRACKS_TO_JUMP = "There are no songs to jump to."
    NOT_ENOUGH_TRACKS_TO_MOVE = "Not enough songs in the queue to move."
    NOT_ENOUGH_TRACKS_TO_SHUFFLE = "Not enough songs in the queue to shuffle."
    INVALID_POSITION = "Invalid position {position}: choose between 2 and {length}."
    INVALID_MOVE_POSITIONS = "Invalid positions provided: choose between 2 and {length}."
    INVALID_VOLUME = "Volume must be between {minimum} and {maximum}."

    # Resolution errors
    UNSUPPORTED_LINK = "Unsupported Spotify URL type."
    NO_VIDEO_RESULTS = "No video results found."
    NO_SEARCH_RESULTS = "No results found."
    NO_MATCH_FOR_SPOTIFY_TRACK = "Could not find a matching YouTube video for this track."
    NO_PLAYABLE_IN_PLAYLIST = "No playable tracks found in this playlist."
    NO_PLAYABLE_IN_SPOTIFY_PLAYLIST = "No playable tracks found in this Spotify playlist."
    NO_PLAYABLE_IN_SPOTIFY_ALBUM = "No playable tracks found in this Spotify album."
    FETCH_VIDEO_FAILED = "Error fetching video details."
    FETCH_PLAYLIST_FAILED = "Error fetching playlist details."
    FETCH_SPOTIFY_TRACK_FAILED = "Error fetching Spotify track details."
    FETCH_SPOTIFY_PLAYLIST_FAILED = "Error fetching Spotify playlist details."
    FETCH_SPOTIFY_ALBUM_FAILED = "Error fetching Spotify album details."
    SPOTIFY_NOT_CONFIGURED = "Spotify links are not enabled on this bot."
    NO_STREAM_URL = "No playable stream found for {url}"

    # Session / permission errors
    NO_ACTIVE_QUEUE = "There is no active queue."
    NO_SONG_PLAYING = "There is no song playing."
    SKIP_NOT_ALLOWED = "You do not have permission to skip directly. Use /voteskip instead."
    OWNER_ONLY_REFRESH = "Only the bot owner can refresh commands."
    COULD_NOT_JOIN_VOICE = "I couldn't join your voice channel."
    NOTHING_TO_PAUSE = "Nothing is playing."
    NOTHING_TO_RESUME = "Nothing is paused."


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Voice/Audio Operations
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s"
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_DESTROY_FAILED = "Failed to disconnect voice in guild %s"
    GUILD_NOT_FOUND = "Guild %s not found"
    CHANNEL_NOT_VOICE = "Channel %s is not a voice channel"
    STREAM_ENDED = "Stream ended in guild %s (error: %s)"
    STREAM_CALLBACK_ERROR = "Error in stream-end callback for guild %s"
    STREAM_NO_CALLBACK = "No stream-end callback set for guild %s"

    # Playback Operations
    PLAYBACK_STARTED = "Started playing '%s' in guild %s"
    PLAYBACK_STOPPED = "Stopped stream in guild %s"
    PLAYBACK_PAUSED = "Paused playback in guild %s"
    PLAYBACK_RESUMED = "Resumed playback in guild %s"
    PLAYBACK_VOLUME_SET = "Volume set to %.2f in guild %s"
    PLAYBACK_STREAM_FAILED = "Skipping '%s' in guild %s: stream unavailable (%s)"
    PLAYBACK_STREAM_ERROR = "Stream error while playing '%s' in guild %s: %s"
    PLAYBACK_STALE_CALLBACK = "Ignoring stale stream-end callback for guild %s"
    PLAYBACK_LOOPING = "Loop enabled, replaying '%s' in guild %s"
    PLAYBACK_LOOP_TOGGLED = "Loop %s in guild %s"

    # Track / Queue Operations
    TRACK_SKIPPED = "Skipped track: %s in guild %s"
    TRACK_JUMPED = "Jumped to '%s' in guild %s"
    QUEUE_ENQUEUED = "Enqueued %d track(s) in guild %s (started=%s)"
    QUEUE_EMPTY = "Queue empty in guild %s"
    QUEUE_REMOVED = "Removed '%s' from position %s in guild %s"
    QUEUE_MOVED = "Moved '%s' from %s to %s in guild %s"
    QUEUE_SHUFFLED = "Shuffled %d upcoming tracks in guild %s"
    QUEUE_CLEARED = "Cleared %s tracks from queue in guild %s"

    # Voting
    VOTE_RECORDED = "Skip vote by %s in guild %s (%s/%s)"
    VOTE_PASSED = "Vote skip passed in guild %s (%s/%s)"
    VOTE_NOT_IN_CHANNEL = "Rejected skip vote by %s in guild %s: not in the voice channel"

    # Session lifecycle
    SESSION_CREATED = "Created session for guild %s"
    SESSION_DESTROYED = "Destroyed session for guild %s (reason=%s)"
    SESSION_RECREATE_RACE = "Session for guild %s was torn down during enqueue, retrying"
    SESSION_ROOM_EMPTY = "No listeners left in guild %s, tearing down"
    SESSION_SHUTDOWN = "Tearing down %d live session(s)"
    IDLE_SCHEDULED = "Queue idle in guild %s, scheduling teardown in %ss"
    IDLE_CANCELLED = "Cancelled idle teardown for guild %s"
    IDLE_FIRED = "Idle timeout reached for guild %s"
    IDLE_TEARDOWN_FAILED = "Idle teardown failed for guild %s"

    # Resolution/Search
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info from %s"
    YTDLP_FAILED_SEARCH = "Failed to search for %r"
    YTDLP_FAILED_EXTRACT_PLAYLIST = "Failed to extract playlist from %s"
    YTDLP_NO_STREAM_URL = "No stream URL found for %s"
    CACHE_HIT_URL = "Cache hit for URL: %s"
    CACHE_EXPIRED_CLEANED = "Cleaned %d expired cache entries"
    SPOTIFY_DISABLED = "Spotify credentials not set; Spotify links will not work."
    SPOTIFY_REQUEST_FAILED = "Spotify request failed for %s %s"
    SPOTIFY_NO_MATCH = "No YouTube match for Spotify track %r"
    RESOLVED = "Resolved %r to %d track(s) (%d failed)"

    # Application Lifecycle
    BOT_STARTING = "Starting Discord Jukebox in {environment} mode"
    BOT_SETUP = "Setting up bot..."
    BOT_CONTAINER_INITIALIZED = "Container initialized successfully"
    BOT_CONTAINER_INIT_FAILED = "Failed to initialize container: %s"
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_STARTING_RUN = "Starting bot..."
    BOT_STOPPED = "Bot stopped successfully"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %ss"
    BOT_CONTAINER_SHUTDOWN = "Container shutdown complete"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_READY = "Bot ready as %s (%s)"
    BOT_CONNECTED_GUILDS = "Connected to %s guilds"

    # Bot Cog Management
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_COGS_LOADED_SUMMARY = "Cogs loaded: %s success, %s failed"

    # Bot Command Sync
    BOT_SYNCED_GUILD = "Synced %s commands to guild %s"
    BOT_SYNC_GUILD_FAILED = "Failed to sync to guild %s: %s"
    BOT_SYNCED_GLOBAL = "Synced %s commands globally"
    BOT_SYNC_GLOBAL_FAILED = "Failed to sync commands globally: %s"
    BOT_SYNC_ON_STARTUP_FAILED = "Failed to sync commands on startup: %s"
    BOT_GLOBAL_COMMANDS_CLEARED = "Cleared global commands at the request of %s"
    BOT_GLOBAL_COMMANDS_CLEAR_FAILED = "Failed to clear global commands"

    # Bot Error Handling
    BOT_SLASH_COMMAND_ERROR = "Slash command error in '%s': %s"
    BOT_SLASH_COMMAND_REJECTED = "Slash command '%s' rejected: %s"
    BOT_ERROR_MESSAGE_SEND_FAILED = "Failed to send error message to user"
    VIEW_ACTION_ERROR = "Error in %s callback: %s"
    VIEW_ACTION_REJECTED = "%s action rejected: %s"
    NOTIFY_FAILED = "Failed to post notice to channel %s in guild %s"


class DiscordUIMessages:
    """User-facing Discord messages and responses.

    These strings are shown directly to users in Discord interactions.
    Keep them concise, friendly, and include appropriate emoji.
    """

    # Play / Search
    PLAY_NOW_PLAYING = "▶️ Now playing: **{title}**"
    PLAY_ADDED = "➕ Added to queue: **{title}**"
    PLAY_NOW_PLAYING_COLLECTION = "▶️ Now playing {kind}: **{name}** with {count} tracks."
    PLAY_ADDED_COLLECTION = "➕ Added {kind}: **{name}** ({count} tracks) to the queue."
    PLAY_PARTIAL_SUFFIX = " ({failed} could not be matched.)"
    SEARCH_PROMPT = "🔍 Select a video from the list below:"
    SEARCH_PLACEHOLDER = "Select a video"
    SEARCH_TIMEOUT = "⌛ No selection made, please try again."
    SEARCH_NOT_YOURS = "This is not your selection!"

    # Skip / Vote
    SKIP_DONE = "⏭️ Song skipped."
    VOTE_ALREADY_VOTED = "You have already voted to skip this song. ({votes}/{threshold} votes)"
    VOTE_RECORDED = "🗳️ Your vote has been registered. ({votes}/{threshold} votes)"
    VOTE_THRESHOLD_MET = "⏭️ Vote threshold reached ({votes}/{threshold}). Skipping song."
    VOTE_NOT_IN_CHANNEL = "Join my voice channel to vote skip."

    # Playback controls
    ACTION_STOPPED = "⏹️ Playback stopped and queue cleared."
    ACTION_PAUSED = "⏸️ Playback paused."
    ACTION_RESUMED = "▶️ Playback resumed."
    ACTION_VOLUME_SET = "🔊 Volume set to {volume}"
    ACTION_LOOP_ENABLED = "🔁 Looping is now enabled."
    ACTION_LOOP_DISABLED = "➡️ Looping is now disabled."

    # Queue mutations
    ACTION_SHUFFLED = "🔀 Queue shuffled."
    ACTION_CLEARED = "🗑️ Cleared the queue (except the currently playing song)."
    ACTION_REMOVED = "🗑️ Removed **{title}** from the queue."
    ACTION_MOVED = "↕️ Moved **{title}** from position {from_pos} to {to_pos}."
    ACTION_JUMPED = "⏩ Jumping to **{title}**."
    ACTION_JUMP_NOTHING_PLAYABLE = "⚠️ None of the remaining songs could be played."

    # Queue / Now playing
    STATE_QUEUE_EMPTY = "The queue is empty."
    STATE_NOTHING_PLAYING = "No song is currently playing."
    EMBED_QUEUE_TITLE = "📋 Current Queue"
    EMBED_QUEUE_FOOTER = "Page {page} of {total_pages}"
    QUEUE_LINE = "{position}. [{title}]({link}){now_playing}{duration}"
    QUEUE_NOW_PLAYING_MARK = " (Now Playing)"
    QUEUE_NOT_YOURS = "These buttons aren't for you!"
    NOW_PLAYING = "**Now Playing:** {title}{duration}\nRequested by: <@{requester_id}>"
    NOW_PLAYING_ELAPSED = "\nElapsed: {elapsed}"
    BUTTON_PREVIOUS = "Previous"
    BUTTON_NEXT = "Next"

    # Notices posted to the session's text channel
    NOTICE_STREAM_FAILED = "⚠️ Couldn't play **{title}**, skipping to the next song."
    NOTICE_STREAM_FAILED_LOOP = (
        "⚠️ Couldn't play **{title}**, skipping it even though looping is enabled."
    )
    NOTICE_QUEUE_FINISHED = "✅ Finished playing **{title}**. The queue is now empty."
    NOTICE_LEFT_IDLE = "👋 Left the voice channel after sitting idle."
    NOTICE_LEFT_EMPTY = "👋 Everyone left the voice channel, so I left too."

    # Guards
    STATE_SERVER_ONLY = "This command can only be used in a server."
    STATE_MUST_JOIN_VOICE = "You must join a voice channel first!"
    STATE_VERIFY_VOICE_FAILED = "Could not verify your voice state."

    # Admin / misc
    SUCCESS_COMMANDS_REFRESHED = (
        "All global commands have been removed. Changes may take up to an hour to propagate."
    )
    ERROR_REFRESH_FAILED = "❌ There was an error refreshing commands."
    ERROR_GENERIC = "❌ An error occurred: {error}"
    MENTION_REPLY = "hi!"

    HELP_TEXT = (
        "**Music Bot Commands:**\n"
        "/play - Play a video, playlist, or Spotify track/playlist/album by URL or search term\n"
        "/search - Search YouTube interactively\n"
        "/voteskip - Vote to skip the current song\n"
        "/skip - Force skip (requester/DJ only)\n"
        "/stop - Stop playback and clear the queue\n"
        "/pause - Pause playback\n"
        "/resume - Resume playback\n"
        "/queue - Show the current queue (with pagination and clickable links)\n"
        "/np - Show now-playing details\n"
        "/volume - Set playback volume (0.0 to 5.0)\n"
        "/loop - Toggle looping of the current song\n"
        "/shuffle - Shuffle the queue\n"
        "/clear - Clear the queue (except current song)\n"
        "/remove - Remove a song from the queue by position\n"
        "/move - Move a song in the queue\n"
        "/jump - Jump to a specific song\n"
        "/refreshcommands - Remove all global commands (owner only)"
    )
