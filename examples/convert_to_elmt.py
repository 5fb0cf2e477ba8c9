import tempfile
from pathlib import Path

import ezdxf

import dxf2elmt


with tempfile.TemporaryDirectory() as tmp:
    source = Path(tmp) / "lamp.dxf"
    doc = ezdxf.new("R2010")
    msp = doc.modelspace()
    msp.add_circle((0, 0), 10)
    msp.add_line((-7.07, -7.07), (7.07, 7.07))
    msp.add_line((-7.07, 7.07), (7.07, -7.07))
    msp.add_mtext("{\\fArial|b0|i0|c0|p34;H1}", dxfattribs={"insert": (12, 12), "char_height": 5})
    doc.saveas(source)

    result = dxf2elmt.convert(source, dxf2elmt.ConversionOptions(verbose=True, info=True))
    print(result.stats)
    print(result.xml_content)
