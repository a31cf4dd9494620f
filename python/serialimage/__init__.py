# This file is part of serialimage.
#
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

"""In-memory camera images and their serialization to FITS."""

from ._dtypes import *
from ._image import *
from ._metadata import *
from ._pixel_format import *
