import json
import sys
from pathlib import Path

from vedic_api.schemas.panchang import PanchangRequest
from vedic_api.services.orchestrators.panchang_full import build_panchang


def main() -> None:
    in_path = Path(sys.argv[1])
    out_path = Path(sys.argv[2])
    req = PanchangRequest.model_validate_json(in_path.read_text(encoding="utf-8"))
    output = build_panchang(req, ayanamsha=req.config.ayanamsha)
    out_path.write_text(json.dumps(output.model_dump(), indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"Wrote Panchang JSON → {out_path}")


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python cli.py moment.json panchang.json")
        sys.exit(1)
    main()
