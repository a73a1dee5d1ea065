from __future__ import annotations
import argparse, pathlib, sys, traceback
from . import analyze, partition, process, write
from .config import load_config, envelope_config, partition_options, default_tempo_us

def _log(msg: str):
    print(f"[cli] {msg}", file=sys.stderr)

def main(argv=None):
    p = argparse.ArgumentParser(description="MIDI -> synth track literal (C initializer)")
    p.add_argument("--in", dest="infile", required=True, help="Input MIDI file (.mid)")
    p.add_argument("--out", dest="outfile", default=None, help="Write the literal to this file instead of stdout")
    p.add_argument("--config", dest="config", default=None, help="YAML config (defaults applied if omitted)")
    p.add_argument("--dump-tracks", action="store_true", help="Print per-track chord timing instead of the literal")

    args = p.parse_args(argv)

    in_path = pathlib.Path(args.infile).expanduser().resolve()
    if not in_path.exists():
        _log(f"ERROR: Input not found: {in_path}")
        sys.exit(1)

    cfg = load_config(args.config)
    _log(f"infile = {in_path}")

    try:
        perf = analyze.read_midi(str(in_path), default_tempo_us(cfg))
        if args.dump_tracks:
            tracks = partition.partition_chords(perf.chords, partition_options(cfg))
            print(write.dump_tracks(tracks, perf.tempo_map))
            _log(f"Done. tracks={len(tracks)} chords={len(perf.chords)}")
            return
        song = process.build_song(
            perf.chords, perf.tempo_map,
            env_cfg=envelope_config(cfg),
            part_opts=partition_options(cfg),
        )
        if args.outfile:
            out_path = pathlib.Path(args.outfile).expanduser().resolve()
            write.write_song_file(song, str(out_path))
            _log(f"literal -> {out_path}")
        else:
            write.write_song(song, sys.stdout)
    except Exception:
        traceback.print_exc()
        sys.exit(2)

    _log(f"Done. tracks={song.num_tracks} chords={len(perf.chords)} tpb={perf.ticks_per_beat}")

if __name__ == "__main__":
    main()
