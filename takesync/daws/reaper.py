"""REAPER ``.rpp`` project writer.

REAPER reads ``.rpp`` structurally: ``<TAG ...`` opens a block, a line
holding only ``>`` closes it, and everything in between is one
``KEY value...`` per line. The preamble below is fixed project boilerplate;
only the session id and the track blocks vary.
"""

import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from takesync.media import MediaItem
from takesync.models import MediaType

EXTENSION = ".rpp"
DEFAULT_NAME = "new-project"

FORMAT_MARKERS = {
    MediaType.AUDIO: "WAVE",
    MediaType.VIDEO: "VIDEO",
}

PROJECT_TEMPLATE = """\
<REAPER_PROJECT 0.1 "5.983/linux64" {session_id}
  RIPPLE 0
  GROUPOVERRIDE 0 0 0
  AUTOXFADE 1
  ENVATTACH 1
  POOLEDENVATTACH 0
  MIXERUIFLAGS 11 48
  PEAKGAIN 1
  FEEDBACK 0
  PANLAW 1
  PROJOFFS 0 0 0
  MAXPROJLEN 0 600
  GRID 3199 8 1 8 1 0 0 0
  TIMEMODE 1 5 -1 30 0 0 -1
  VIDEO_CONFIG 0 0 256
  PANMODE 3
  CURSOR 56
  ZOOM 1.1747815778626 0 0
  VZOOMEX 6
  USE_REC_CFG 0
  RECMODE 1
  SMPTESYNC 0 30 100 40 1000 300 0 0 1 0 0
  LOOP 0
  LOOPGRAN 0 4
  RECORD_PATH "" ""
  <RECORD_CFG
  >
  <APPLYFX_CFG
  >
  RENDER_FILE ""
  RENDER_PATTERN ""
  RENDER_FMT 0 2 0
  RENDER_1X 0
  RENDER_RANGE 1 0 0 18 1000
  RENDER_RESAMPLE 3 0 1
  RENDER_ADDTOPROJ 0
  RENDER_STEMS 0
  RENDER_DITHER 0
  TIMELOCKMODE 1
  TEMPOENVLOCKMODE 1
  ITEMMIX 0
  DEFPITCHMODE 589824 0
  TAKELANE 1
  SAMPLERATE 44100 0 0
  <RENDER_CFG
  >
  LOCK 1
  <METRONOME 6 2
    VOL 0.25 0.125
    FREQ 800 1600 1
    BEATLEN 4
    SAMPLES "" ""
    PATTERN 2863311530 2863311529
  >
  GLOBAL_AUTO -1
  TEMPO 120 4 4
  PLAYRATE 1 0 0.25 4
  SELECTION 0 0
  SELECTION2 0 0
  MASTERAUTOMODE 0
  MASTERTRACKHEIGHT 0 0
  MASTERPEAKCOL 16576
  MASTERMUTESOLO 0
  MASTERTRACKVIEW 0 0.6667 0.5 0.5 0 0 0
  MASTERHWOUT 0 0 1 0 0 0 0 -1
  MASTER_NCH 2 2
  MASTER_VOLUME 1 0 -1 -1 1
  MASTER_FX 1
  MASTER_SEL 0
  <MASTERPLAYSPEEDENV
    ACT 0 -1
    VIS 0 1 1
    LANEHEIGHT 0 0
    ARM 0
    DEFSHAPE 0 -1 -1
  >
  <TEMPOENVEX
    ACT 0 -1
    VIS 1 0 1
    LANEHEIGHT 0 0
    ARM 0
    DEFSHAPE 1 -1 -1
  >
  <PROJBAY
  >{tracks}
>
"""

TRACK_TEMPLATE = """
  <TRACK {{{track_id}}}
    NAME "{name}"
    PEAKCOL 16576
    BEAT -1
    AUTOMODE 0
    VOLPAN 1 0 -1 -1 1
    MUTESOLO 0 0 0
    IPHASE 0
    ISBUS 0 0
    BUSCOMP 0 0
    SHOWINMIX 1 0.6667 0.5 1 0.5 0 0 0
    FREEMODE 0
    SEL 0
    REC 0 0 0 0 0 0 0
    VU 2
    TRACKHEIGHT 0 0 0
    INQ 0 0 0 0.5 100 0 0 100
    NCHAN 2
    FX 1
    TRACKID {{{track_id}}}
    PERF 0
    MIDIOUT -1
    MAINSEND 1 0
    <ITEM
      POSITION 0
      SNAPOFFS 0
      LENGTH {length}
      LOOP 1
      ALLTAKES 0
      FADEIN 1 0.01 0 1 0 0
      FADEOUT 1 0.01 0 1 0 0
      MUTE 0
      SEL 0
      IGUID {{{item_id}}}
      IID 1
      NAME "{file_name}"
      VOLPAN 1 0 1 -1
      SOFFS 0
      PLAYRATE 1 1 0 -1 0 0.0025
      CHANMODE 0
      GUID {{{source_id}}}
      <SOURCE {format_marker}
        FILE "{path}"
      >
    >
  >"""


class IncompleteMediaError(ValueError):
    """Raised when a take lacks the facts a track needs (duration, media type)."""
    pass


def new_guid() -> str:
    return str(uuid.uuid4()).upper()


@dataclass(frozen=True)
class Track:
    """One REAPER track holding a single item that plays one source file."""

    track_id: str
    name: str
    file_name: str
    path: str
    length: str
    source_id: str
    item_id: str
    media_type: MediaType

    @property
    def format_marker(self) -> str:
        return FORMAT_MARKERS[self.media_type]

    @classmethod
    def from_media_item(cls, item: MediaItem) -> "Track":
        duration = item.duration
        media_type = item.media_type
        if duration is None:
            raise IncompleteMediaError(f"{item.path}: duration unknown")
        if media_type is None:
            raise IncompleteMediaError(f"{item.path}: unsupported media type")
        if item.end is None:
            raise IncompleteMediaError(f"{item.path}: end time unknown")
        return cls(
            track_id=new_guid(),
            name=item.name,
            file_name=item.name,
            path=str(item.path.absolute()),
            length=repr(duration.total_seconds()),
            source_id=new_guid(),
            item_id=new_guid(),
            media_type=media_type,
        )


def render_track(track: Track) -> str:
    # Names and paths are substituted verbatim; REAPER has no quote escape.
    return TRACK_TEMPLATE.format(
        track_id=track.track_id,
        name=track.name,
        length=track.length,
        item_id=track.item_id,
        file_name=track.file_name,
        source_id=track.source_id,
        format_marker=track.format_marker,
        path=track.path,
    )


def render_project(tracks: list[Track], session_id: str) -> str:
    """Render a complete project: the fixed preamble, then one block per track in order."""
    return PROJECT_TEMPLATE.format(
        session_id=session_id,
        tracks="".join(render_track(t) for t in tracks),
    )


@dataclass
class ReaperProject:
    tracks: list[Track] = field(default_factory=list)
    session_id: str = field(default_factory=lambda: str(int(time.time())))

    def render(self) -> str:
        return render_project(self.tracks, self.session_id)

    def target_name(self) -> str:
        if not self.tracks:
            return DEFAULT_NAME + EXTENSION
        base_name = Path(self.tracks[0].file_name).stem.replace(".", "")
        return (base_name or DEFAULT_NAME) + EXTENSION


def project_for_group(video: MediaItem, audios: list[MediaItem], session_id: str | None = None) -> ReaperProject:
    """Build a project with the video track first and its audio takes below it."""
    tracks = [Track.from_media_item(item) for item in [video, *audios]]
    if session_id is None:
        return ReaperProject(tracks=tracks)
    return ReaperProject(tracks=tracks, session_id=session_id)
