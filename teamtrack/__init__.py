"""TeamTrack: Slack-derived attendance, task activity and team scoreboards."""

__version__ = "1.0.0"
