# Licensed under a 3-clause BSD style license - see LICENSE.txt
version = '1.0.0'
