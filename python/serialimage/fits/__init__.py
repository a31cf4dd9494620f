# This file is part of serialimage.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

"""Writing images to the FITS file format.

Files written by this package have one of two layouts:

- Uncompressed images are stored in the primary HDU, whose header also holds
  the ``CAMERA``, ``DATE-OBS`` and ``TIMESTAMP`` cards and, when the image has
  metadata, the acquisition cards (``XBINNING``, ``EXPTIME``, ``GAIN``, ...)
  followed by any extended records.

- Compressed images are stored in an extension HDU with ``EXTNAME='IMAGE'``,
  which holds the same header cards.  The primary HDU has no data and only
  the cards ``COMPRESSED_IMAGE = 'T'`` and ``COMPRESSION_ALGO``, which names
  the algorithm.  All algorithms except ``bzip2`` use FITS tile compression
  (so the extension is a ``ZIMAGE`` binary table); ``bzip2`` instead
  compresses the whole file stream and leaves the extension a plain image.

Compression is selected with a ``[compress X]`` qualifier on the file
extension, following the CFITSIO extended file name syntax; the qualifier is
returned as part of the output path but is not part of the name on disk.
Multi-channel images are written as 3-d arrays with the channel axis varying
fastest (``NAXIS1``), followed by columns and then rows.
"""

from ._common import *
from ._writer import *
