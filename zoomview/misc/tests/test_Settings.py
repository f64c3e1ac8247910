#
# Unit Tests for the SettingGroup class
#
import io
import unittest

from zoomview.misc import Settings


class TestSettings(unittest.TestCase):

    def setUp(self):
        self.settings = Settings.SettingGroup(name='test')
        self.settings.add_defaults(max_scale=8.0, bounce_enabled=True,
                                   zoom_easing='cubic_out')

    def test_defaults(self):
        assert self.settings['max_scale'] == 8.0
        assert self.settings.get('bounce_enabled') is True
        assert self.settings.get('missing', 42) == 42
        assert 'zoom_easing' in self.settings

    def test_add_defaults_does_not_override(self):
        self.settings['max_scale'] = 4.0
        self.settings.add_defaults(max_scale=8.0)

        assert self.settings['max_scale'] == 4.0

    def test_set_makes_callback(self):
        values = []

        def set_cb(setting, value):
            values.append((setting.name, value))

        self.settings.get_setting('bounce_enabled').add_callback('set',
                                                                  set_cb)
        self.settings.set(bounce_enabled=False)

        assert values == [('bounce_enabled', False)]
        assert self.settings['bounce_enabled'] is False

    def test_set_without_callback(self):
        values = []

        def set_cb(setting, value):
            values.append(value)

        self.settings.get_setting('max_scale').add_callback('set', set_cb)
        self.settings.set(callback=False, max_scale=3.0)

        assert values == []
        assert self.settings['max_scale'] == 3.0

    def test_load_buffer(self):
        buf = "\n".join(["# zoom settings",
                         "max_scale = 6.0",
                         "",
                         "zoom_easing = 'linear'",
                         "tap_zoom_level = 3"])
        self.settings.load(buf=buf)

        assert self.settings['max_scale'] == 6.0
        assert self.settings['zoom_easing'] == 'linear'
        assert self.settings['tap_zoom_level'] == 3

    def test_load_bad_syntax(self):
        self.assertRaises(Settings.SettingError, self.settings.load,
                          buf="this is not an assignment")

    def test_load_bad_value(self):
        self.assertRaises(Settings.SettingError, self.settings.load,
                          buf="max_scale = [1, ")

    def test_save_round_trip(self):
        out_f = io.StringIO()
        self.settings.save(output=out_f)

        other = Settings.SettingGroup(name='other')
        other.load(buf=out_f.getvalue())

        assert other.get_dict() == self.settings.get_dict()

    def test_save_rejects_non_finite(self):
        for value in (float('inf'), float('nan')):
            self.settings['max_scale'] = value
            out_f = io.StringIO()
            self.assertRaises(Settings.SettingError, self.settings.save,
                              output=out_f)
            # nothing is written
            assert out_f.getvalue() == ""


if __name__ == '__main__':
    unittest.main()

#END
